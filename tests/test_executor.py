import io

import pytest

from modelang.executor import UNINITIALISED, Executor
from modelang.lexemes import ExecutionError, IdentTable, Lex, LexType
from modelang.parser import Parser
from modelang.poliz import Poliz


def run(source, stdin_text=""):
    table = IdentTable()
    poliz = Parser(source, table).analyze()
    out = io.StringIO()
    Executor(table, io.StringIO(stdin_text), out).execute(poliz)
    return out.getvalue()


def run_with_table(source, stdin_text=""):
    table = IdentTable()
    poliz = Parser(source, table).analyze()
    out = io.StringIO()
    Executor(table, io.StringIO(stdin_text), out).execute(poliz)
    return table, out.getvalue()


def build(*lexemes):
    poliz = Poliz()
    for lex in lexemes:
        poliz.append(lex)
    return poliz


def test_write_int_literal():
    assert run("program { write(42); }") == "42\n"


def test_write_string_keeps_quotes():
    assert run('program { write("hi"); }') == '"hi"\n'


def test_write_real_literal():
    assert run("program { write(2.5); }") == "2.5\n"


def test_write_initialised_variable():
    assert run("program { int x = 5; write(x); }") == "5\n"


def test_write_real_variable():
    assert run("program { real r = 0.5; write(r); }") == "0.5\n"


def test_uninitialised_variable_raises():
    with pytest.raises(ExecutionError) as info:
        run("program { int x; write(x); }")
    assert str(info.value) == UNINITIALISED


def test_assignment_updates_table():
    table, output = run_with_table("program { int x; x = 9; write(x); }")
    ident = table[table.put("x")]
    assert ident.int_value == 9
    assert ident.assigned is True
    assert output == "9\n"


def test_int_assigned_to_real_variable():
    assert run("program { real r; r = 2; write(r); }") == "2\n"


def test_integer_division_truncates_toward_zero():
    assert run("program { int x = -7; write(x / 2); }") == "-3\n"


def test_integer_division_by_zero_raises():
    with pytest.raises(ExecutionError):
        run("program { write(1 / 0); }")


def test_string_literal_concatenation_puts_right_first():
    assert run('program { write("a" + "b"); }') == '"b"' + '"a"' + "\n"


def test_addition_is_symmetric_for_numbers():
    assert run("program { write(4 + 9); }") == run("program { write(9 + 4); }")


@pytest.mark.parametrize(
    "condition, expected",
    [
        ("1 < 2", '"yes"'),
        ("2 < 1", '"no"'),
        ("2 >= 2", '"yes"'),
        ("1 != 1", '"no"'),
        ('"a" < "b"', '"yes"'),
        ("not 0", '"yes"'),
        ("not 1", '"no"'),
        ("1 and 0", '"no"'),
        ("0 or 1", '"yes"'),
    ],
)
def test_conditions_choose_branch(condition, expected):
    source = f'program {{ if ({condition}) write("yes"); else write("no"); }}'
    assert run(source) == expected + "\n"


def test_string_variable_equals_literal():
    source = 'program { string s = "x"; if (s == "x") write("yes"); else write("no"); }'
    assert run(source) == '"yes"\n'


def test_while_loop_counts():
    source = "program { int i = 0; while (i < 3) { write(i); i = i + 1; } }"
    assert run(source).split() == [str(n) for n in range(3)]


def test_for_loop_counts():
    source = "program { int i; for (i = 0; i < 3; i = i + 1) write(i); }"
    assert run(source).split() == [str(n) for n in range(3)]


def test_goto_skips_statements():
    source = 'program { goto skip; write("no"); skip: write("yes"); }'
    assert run(source) == '"yes"\n'


def test_write_with_several_expressions_prints_last():
    assert run("program { write(1, 2); }") == "2\n"


def test_unary_minus_on_variable_changes_it():
    assert run("program { int x = 5; write(-x); write(x); }").split() == ["-5", "-5"]


def test_long_loop_overflows_value_stack():
    source = "program { int i = 0; while (i < 200) i = i + 1; }"
    with pytest.raises(ExecutionError, match="Stack_is_full"):
        run(source)


def test_read_int():
    assert run("program { int x; read(x); write(x); }", "17\n") == "17\n"


def test_read_real():
    assert run("program { real r; read(r); write(r); }", "2.5\n") == "2.5\n"


def test_read_strings_are_whitespace_separated_words():
    source = "program { string a; string b; read(a); read(b); write(a); write(b); }"
    assert run(source, "  hello world\n").split() == ["hello", "world"]


def test_read_marks_variable_assigned():
    table, _ = run_with_table("program { int x; read(x); }", "3\n")
    assert table[table.put("x")].assigned is True


def test_read_past_end_of_input_raises():
    with pytest.raises(ExecutionError):
        run("program { int x; read(x); }", "")


def test_read_malformed_int_raises():
    with pytest.raises(ExecutionError):
        run("program { int x; read(x); }", "abc\n")


def test_false_jump_skips_code():
    poliz = build(
        Lex(LexType.INT_NUM, 0),
        Lex(LexType.POLIZ_LABEL, 5),
        Lex(LexType.POLIZ_FGO),
        Lex(LexType.STR, 0, 0.0, '"a"'),
        Lex(LexType.WRITE),
        Lex(LexType.STR, 0, 0.0, '"b"'),
        Lex(LexType.WRITE),
    )
    out = io.StringIO()
    Executor(IdentTable(), io.StringIO(), out).execute(poliz)
    assert out.getvalue() == '"b"\n'


def test_unconditional_jump():
    poliz = build(
        Lex(LexType.POLIZ_LABEL, 3),
        Lex(LexType.POLIZ_GO),
        Lex(LexType.INT_NUM, 1),
        Lex(LexType.INT_NUM, 9),
        Lex(LexType.WRITE),
    )
    out = io.StringIO()
    Executor(IdentTable(), io.StringIO(), out).execute(poliz)
    assert out.getvalue() == "9\n"


def test_pop_from_empty_stack_raises():
    poliz = build(Lex(LexType.WRITE))
    with pytest.raises(ExecutionError, match="Stack_is_empty"):
        Executor(IdentTable(), io.StringIO(), io.StringIO()).execute(poliz)


def test_default_output_is_sys_stdout(capsys):
    table = IdentTable()
    poliz = Parser("program { write(42); }", table).analyze()
    Executor(table).execute(poliz)
    assert capsys.readouterr().out == "42\n"