import io

import pytest

from modelang.interpreter import Interpreter, main, run_file
from modelang.lexemes import ExecutionError, LexicalError, LexType, ParseError


def _run(text, stdin_text=""):
    out = io.StringIO()
    Interpreter(text, io.StringIO(stdin_text), out).interpret()
    return out.getvalue()


def test_write_string_literal_keeps_quotes():
    assert _run('program { write("hi"); }') == '"hi"\n'


def test_write_initialised_variable():
    assert _run("program { int x = 5; write(x); }") == "5\n"


@pytest.mark.parametrize(
    "value, expected",
    [(1, '"yes"\n'), (2, '"no"\n')],
)
def test_if_else_chooses_branch(value, expected):
    text = (
        f'program {{ int x = {value}; if (x == 1) write("yes"); else write("no"); }}'
    )
    assert _run(text) == expected


def test_read_then_write():
    assert _run("program { int x; read(x); write(x); }", "42\n") == "42\n"


def test_read_string_variable():
    assert _run("program { string s; read(s); write(s); }", "word\n") == "word\n"


def test_goto_skips_statement():
    text = 'program { goto skip; write("no"); skip: write("yes"); }'
    assert _run(text) == '"yes"\n'


def test_assignment_updates_table():
    interpreter = Interpreter("program { int x = 5; x = 7; }", io.StringIO(), io.StringIO())
    interpreter.interpret()
    index = interpreter.table.put("x")
    assert interpreter.table[index].int_value == 7
    assert interpreter.table[index].assigned


def test_poliz_is_built_by_interpret():
    interpreter = Interpreter('program { write("a"); }', io.StringIO(), io.StringIO())
    interpreter.interpret()
    kinds = [lex.type for lex in interpreter.poliz]
    assert kinds == [LexType.STR, LexType.WRITE]


def test_missing_program_word():
    with pytest.raises(ParseError):
        _run("begin { }")


def test_undeclared_identifier():
    with pytest.raises(ParseError):
        _run("program { write(y); }")


def test_incorrect_character():
    with pytest.raises(LexicalError):
        _run("program { int x = 5 # ; }")


def test_uninitialised_variable():
    with pytest.raises(ExecutionError):
        _run("program { int x; write(x); }")


def test_run_file(tmp_path):
    path = tmp_path / "prog.txt"
    path.write_text('program { write("ok"); }', encoding="utf-8")
    out = io.StringIO()
    run_file(path, io.StringIO(), out)
    assert out.getvalue() == '"ok"\n'


def test_main_wrong_argument_count(capsys):
    assert main([]) == 1
    assert capsys.readouterr().out == (
        "Error: expected 2 cmd arguments, but received 1 instead.\n"
    )


def test_main_runs_program(tmp_path, capsys):
    path = tmp_path / "prog.txt"
    path.write_text('program { write("ok"); }', encoding="utf-8")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == '"ok"\n'


def test_main_reports_parse_error(tmp_path, capsys):
    path = tmp_path / "prog.txt"
    path.write_text("begin { }", encoding="utf-8")
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == (
        "Ошибка! Программа на модельном языке должна начинаться со слова program.\n"
    )


def test_main_reports_unexpected_lexeme(tmp_path, capsys):
    path = tmp_path / "prog.txt"
    path.write_text("program { write(1; }", encoding="utf-8")
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == "unexpected lexeme;\n"


def test_main_reports_execution_error(tmp_path, capsys):
    path = tmp_path / "prog.txt"
    path.write_text("program { int x; write(x); }", encoding="utf-8")
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == "Ошибка! Неинициализированная переменная.\n"


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.txt")]) == 1
    assert "absent.txt" in capsys.readouterr().out