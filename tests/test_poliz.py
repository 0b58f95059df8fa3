import pytest

from modelang.lexemes import IdentTable, Lex, LexType, ParseError
from modelang.poliz import DUPLICATE_LABEL, UNDEFINED_LABEL, LabelTable, Poliz


def test_define_twice_raises():
    labels = LabelTable()
    labels.define("start", 3)
    with pytest.raises(ParseError) as info:
        labels.define("start", 7)
    assert str(info.value) == DUPLICATE_LABEL
    assert labels.labels == {"start": 3}


def test_add_jump_keeps_first_place():
    labels = LabelTable()
    labels.add_jump("loop", 2)
    labels.add_jump("loop", 9)
    assert labels.jumps == {"loop": 2}


def test_check_undefined_label():
    labels = LabelTable()
    labels.add_jump("nowhere", 0)
    with pytest.raises(ParseError) as info:
        labels.check()
    assert str(info.value) == UNDEFINED_LABEL


def test_check_passes_when_all_defined():
    labels = LabelTable()
    labels.add_jump("a", 0)
    labels.define("a", 5)
    labels.check()
    assert labels.labels["a"] == 5


def test_append_and_blank_positions():
    poliz = Poliz()
    first = poliz.append(Lex(LexType.INT_NUM, 4))
    slot = poliz.blank()
    assert (first, slot) == (0, 1)
    assert len(poliz) == 2
    assert poliz[1].type == LexType.NULL
    assert poliz[0] == Lex(LexType.INT_NUM, 4)


def test_put_replaces():
    poliz = Poliz()
    slot = poliz.blank()
    poliz.append(Lex(LexType.POLIZ_GO))
    poliz.put(Lex(LexType.POLIZ_LABEL, 2), slot)
    assert [lex.type for lex in poliz] == [LexType.POLIZ_LABEL, LexType.POLIZ_GO]
    assert poliz[slot].int_value == 2


def test_put_outside_raises():
    poliz = Poliz()
    with pytest.raises(IndexError):
        poliz.put(Lex(LexType.POLIZ_GO), 0)


def test_getitem_beyond_end():
    poliz = Poliz(max_size=3)
    poliz.append(Lex(LexType.POLIZ_GO))
    with pytest.raises(IndexError, match="indefinite"):
        poliz[1]
    with pytest.raises(IndexError, match="out of array"):
        poliz[3]
    assert len(poliz) == 1
    assert poliz[0].type == LexType.POLIZ_GO


def test_capacity_exceeded():
    poliz = Poliz(max_size=1)
    poliz.blank()
    with pytest.raises(ParseError):
        poliz.append(Lex(LexType.POLIZ_GO))
    assert len(poliz) == 1


def test_resolve_labels():
    labels = LabelTable()
    poliz = Poliz()
    slot = poliz.blank()
    labels.add_jump("end", slot)
    poliz.append(Lex(LexType.POLIZ_GO))
    labels.define("end", len(poliz))
    poliz.append(Lex(LexType.INT_NUM, 1))
    poliz.resolve_labels(labels)
    assert poliz[slot] == Lex(LexType.POLIZ_LABEL, 2)


def test_dump():
    table = IdentTable()
    number = table.put("x")
    poliz = Poliz()
    poliz.append(Lex(LexType.POLIZ_ADDRESS, number))
    poliz.append(Lex(LexType.POLIZ_FGO))
    poliz.append(Lex(LexType.POLIZ_GO))
    assert poliz.dump(table) == "0)  _x\n1)  !F\n2)  !\n"