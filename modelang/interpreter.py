"""Interpreter tying the parser and the executor together, and its command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .executor import Executor
from .lexemes import IdentTable, InterpreterError, ParseError
from .parser import Parser
from .poliz import Poliz


class Interpreter:
    """Checks a program, translates it and runs it."""

    def __init__(
        self,
        text: str,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.table = IdentTable()
        self.parser = Parser(text, self.table)
        self.executor = Executor(self.table, stdin, stdout)

    @property
    def poliz(self) -> Poliz:
        """The reverse Polish code built by the parser."""
        return self.parser.poliz

    def interpret(self) -> None:
        """Analyze the whole program, then run the code it produced."""
        poliz = self.parser.analyze()
        self.executor.execute(poliz)


def _read_program(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def run_file(
    path: str | Path,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Interpret the program stored in the file at path."""
    Interpreter(_read_program(path), stdin, stdout).interpret()


def main(argv: list[str] | None = None) -> int:
    """Run the program named on the command line; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(
            f"Error: expected 2 cmd arguments, but received {len(args) + 1} instead."
        )
        return 1
    try:
        text = _read_program(args[0])
    except (OSError, UnicodeDecodeError) as error:
        print(error)
        return 1
    interpreter = Interpreter(text)
    try:
        interpreter.interpret()
    except ParseError as error:
        if error.lex is not None:
            print("unexpected lexeme" + error.lex.describe(interpreter.table))
        else:
            print(error)
        return 1
    except InterpreterError as error:
        print(error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())