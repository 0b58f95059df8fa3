"""Scanner turning program text into lexemes."""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterator

from .lexemes import (
    DELIMITER_OFFSET,
    DELIMITERS,
    WORDS,
    IdentTable,
    Lex,
    LexicalError,
    LexType,
)

_WHITESPACE = frozenset(" \n\r\t")
_WORD_INDEX = {word: index for index, word in enumerate(WORDS) if index}
_DELIMITER_INDEX = {text: index for index, text in enumerate(DELIMITERS) if index}


def _is_alpha(c: str | None) -> bool:
    return c is not None and ("A" <= c <= "Z" or "a" <= c <= "z")


def _is_digit(c: str | None) -> bool:
    return c is not None and "0" <= c <= "9"


def _delimiter(text: str) -> Lex:
    index = _DELIMITER_INDEX[text]
    return Lex(LexType(DELIMITER_OFFSET + index), index)


class _State(Enum):
    START = auto()
    IDENT = auto()
    INT_NUM = auto()
    INT_DOT = auto()
    REAL_NUM = auto()
    STR = auto()
    COMPARE = auto()
    NEQ = auto()
    MAYBE_COMMENT = auto()
    COMMENT = auto()
    END_COMMENT = auto()


class Scanner:
    """Reads lexemes one at a time from program text."""

    def __init__(self, text: str, table: IdentTable | None = None) -> None:
        self.text = text
        self.table = table if table is not None else IdentTable()
        self._pos = 0

    def _getc(self) -> str | None:
        if self._pos >= len(self.text):
            return None
        c = self.text[self._pos]
        self._pos += 1
        return c

    def _ungetc(self, c: str | None) -> None:
        if c is not None:
            self._pos -= 1

    def next_lex(self) -> Lex:
        """Return the next lexeme; at the end of the text, an EOF lexeme."""
        state = _State.START
        buf = ""
        int_part = 0
        real_num = 0.0
        fraction = 0.0
        while True:
            c = self._getc()
            if state is _State.START:
                if c is None:
                    return Lex(LexType.EOF)
                if c in _WHITESPACE:
                    continue
                if c == '"':
                    buf += c
                    state = _State.STR
                elif _is_alpha(c):
                    buf += c
                    state = _State.IDENT
                elif _is_digit(c):
                    int_part = ord(c) - ord("0")
                    state = _State.INT_NUM
                elif c in "=<>":
                    buf += c
                    state = _State.COMPARE
                elif c == "!":
                    buf += c
                    state = _State.NEQ
                elif c == "/":
                    buf += c
                    state = _State.MAYBE_COMMENT
                elif c in _DELIMITER_INDEX:
                    return _delimiter(c)
                else:
                    raise LexicalError("Incorrect character!")
            elif state is _State.IDENT:
                if _is_alpha(c) or _is_digit(c):
                    buf += c
                else:
                    self._ungetc(c)
                    word = _WORD_INDEX.get(buf)
                    if word:
                        return Lex(LexType(word), word)
                    return Lex(LexType.ID, self.table.put(buf))
            elif state is _State.INT_NUM:
                if _is_digit(c):
                    int_part = int_part * 10 + (ord(c) - ord("0"))
                elif _is_alpha(c):
                    raise LexicalError("Ошибка: некорректный идентификатор.")
                elif c == ".":
                    state = _State.INT_DOT
                else:
                    self._ungetc(c)
                    return Lex(LexType.INT_NUM, int_part)
            elif state is _State.INT_DOT:
                if not _is_digit(c):
                    raise LexicalError("Ошибка: некорректная запись вещественного числа.")
                state = _State.REAL_NUM
                fraction = 0.1
                real_num = float(int_part) + fraction * (ord(c) - ord("0"))
            elif state is _State.REAL_NUM:
                if _is_digit(c):
                    fraction /= 10
                    real_num += fraction * (ord(c) - ord("0"))
                elif c == ".":
                    raise LexicalError("Лишняя точка!")
                else:
                    self._ungetc(c)
                    return Lex(LexType.REAL_NUM, 0, real_num)
            elif state is _State.STR:
                if c is None:
                    raise LexicalError("Ошибка: не хватает закрывающих кавычек.")
                buf += c
                if c == '"':
                    return Lex(LexType.STR, 0, 0.0, buf)
            elif state is _State.COMPARE:
                if c == "=":
                    buf += c
                else:
                    self._ungetc(c)
                return _delimiter(buf)
            elif state is _State.NEQ:
                if c != "=":
                    raise LexicalError("Ошибка при использовании символа '!'.")
                return _delimiter(buf + c)
            elif state is _State.MAYBE_COMMENT:
                if c != "*":
                    self._ungetc(c)
                    return _delimiter(buf)
                state = _State.COMMENT
                buf = ""
            else:
                # Inside a comment, which ends at the first following '/'.
                if c is None:
                    raise LexicalError("unterminated comment")
                if c == "/":
                    state = _State.START
                elif c == "*":
                    state = _State.END_COMMENT

    def __iter__(self) -> Iterator[Lex]:
        """Yield lexemes up to and including the EOF lexeme."""
        while True:
            lex = self.next_lex()
            yield lex
            if lex.type == LexType.EOF:
                return


def tokenize(text: str, table: IdentTable | None = None) -> list[Lex]:
    """Return all lexemes of text, the final EOF lexeme included."""
    return list(Scanner(text, table))