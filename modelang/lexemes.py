"""Lexeme kinds, lexemes, the identifier table and the interpreter's errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class LexType(IntEnum):
    """Every kind of lexeme, plus the extra kinds used in reverse Polish code."""

    NULL = 0
    AND = 1
    DO = 2
    ELSE = 3
    IF = 4
    FALSE = 5
    INT = 6
    NOT = 7
    OR = 8
    PROGRAM = 9
    READ = 10
    REAL = 11
    TRUE = 12
    WHILE = 13
    WRITE = 14
    FOR = 15
    GOTO = 16
    STRING = 17
    SEMICOLON = 18
    LBRACE = 19
    RBRACE = 20
    COMMA = 21
    COLON = 22
    ASSIGN = 23
    LPAREN = 24
    RPAREN = 25
    EQ = 26
    LSS = 27
    GTR = 28
    PLUS = 29
    MINUS = 30
    TIMES = 31
    SLASH = 32
    LEQ = 33
    NEQ = 34
    GEQ = 35
    ID = 36
    INT_NUM = 37
    REAL_NUM = 38
    STR = 39
    EOF = 40
    POLIZ_GO = 41
    POLIZ_FGO = 42
    POLIZ_LABEL = 43
    POLIZ_ADDRESS = 44
    POLIZ_UN_PLUS = 45
    POLIZ_UN_MINUS = 46


# Reserved words; the position of each word equals its LexType value.
WORDS: tuple[str, ...] = (
    "nullword", "and", "do", "else", "if", "false", "int", "not", "or",
    "program", "read", "real", "true", "while", "write", "for", "goto", "string",
)

# Delimiters; the delimiter at position j has LexType value 17 + j.
DELIMITERS: tuple[str, ...] = (
    "nulldelim", ";", "{", "}", ",", ":", "=", "(", ")", "==", "<", ">",
    "+", "-", "*", "/", "<=", "!=", ">=",
)

DELIMITER_OFFSET = LexType.STRING


class InterpreterError(Exception):
    """Base class for every error reported while interpreting a program."""


class LexicalError(InterpreterError):
    """The program text holds something the scanner cannot read."""


class ParseError(InterpreterError):
    """The program is syntactically or semantically incorrect."""

    def __init__(self, message: str, lex: "Lex | None" = None) -> None:
        super().__init__(message)
        self.lex = lex


class ExecutionError(InterpreterError):
    """The program failed while it ran."""


@dataclass
class Lex:
    """A lexeme: its kind and the value fields that kind uses."""

    type: LexType = LexType.NULL
    int_value: int = 0
    real_value: float = 0.0
    str_value: str = "not_string"

    def describe(self, table: "IdentTable") -> str:
        """Return the text shown for this lexeme; identifiers are named from table."""
        kind = self.type
        if kind == LexType.ID:
            return table[self.int_value].name
        if kind < LexType.SEMICOLON:
            return WORDS[kind]
        if kind < LexType.ID:
            return DELIMITERS[kind - DELIMITER_OFFSET]
        if kind in (LexType.INT_NUM, LexType.POLIZ_LABEL):
            return str(self.int_value)
        if kind == LexType.REAL_NUM:
            return f"{self.real_value:g}"
        if kind == LexType.STR:
            return self.str_value
        if kind == LexType.POLIZ_GO:
            return "!"
        if kind == LexType.POLIZ_FGO:
            return "!F"
        if kind == LexType.POLIZ_ADDRESS:
            return "_" + table[self.int_value].name
        if kind == LexType.POLIZ_UN_MINUS:
            return "Unary - "
        if kind == LexType.POLIZ_UN_PLUS:
            return "Unary + "
        return ""


@dataclass
class Ident:
    """An entry of the identifier table."""

    name: str = ""
    declared: bool = False
    type: LexType = LexType.NULL
    assigned: bool = False
    int_value: int = 0
    real_value: float = 0.0
    str_value: str = ""

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.name == other
        if isinstance(other, Ident):
            return (
                self.name, self.declared, self.type, self.assigned,
                self.int_value, self.real_value, self.str_value,
            ) == (
                other.name, other.declared, other.type, other.assigned,
                other.int_value, other.real_value, other.str_value,
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


class IdentTable:
    """Identifiers by number; numbering starts at 1, slot 0 is never given out."""

    def __init__(self, max_size: int = 100) -> None:
        self.max_size = max_size
        self._idents: list[Ident] = [Ident()]

    def put(self, name: str) -> int:
        """Return the number of identifier name, adding it if it is new."""
        for index, ident in enumerate(self._idents[1:], start=1):
            if ident.name == name:
                return index
        if len(self._idents) >= self.max_size:
            raise LexicalError("identifier table is full")
        self._idents.append(Ident(name))
        return len(self._idents) - 1

    def __getitem__(self, index: int) -> Ident:
        if index < 0 or index >= len(self._idents):
            raise IndexError(f"no identifier number {index}")
        return self._idents[index]

    def __len__(self) -> int:
        return len(self._idents) - 1