"""Reverse Polish program code and the table of goto labels."""

from __future__ import annotations

from typing import Iterator

from .lexemes import IdentTable, Lex, LexType, ParseError

DUPLICATE_LABEL = "Ошибка! Одна и та же метка помечает разные точки в тексте программы."
UNDEFINED_LABEL = "Ошибка! Встретилась неописанная метка."


class LabelTable:
    """Labels placed in the program and the goto statements that jump to them."""

    def __init__(self) -> None:
        self.labels: dict[str, int] = {}
        self.jumps: dict[str, int] = {}

    def define(self, name: str, place: int) -> None:
        """Record that label name marks position place of the code."""
        if name in self.labels:
            raise ParseError(DUPLICATE_LABEL)
        self.labels[name] = place

    def add_jump(self, name: str, place: int) -> None:
        """Record a goto to name whose target slot is place; only the first counts."""
        self.jumps.setdefault(name, place)

    def check(self) -> None:
        """Raise ParseError if some goto names a label that is never placed."""
        if any(name not in self.labels for name in self.jumps):
            raise ParseError(UNDEFINED_LABEL)


class Poliz:
    """Program code in reverse Polish notation, filled as the parser works."""

    def __init__(self, max_size: int = 1000) -> None:
        self.max_size = max_size
        self._code: list[Lex] = []

    def _grow(self, lex: Lex) -> int:
        if len(self._code) >= self.max_size:
            raise ParseError("POLIZ:out of array")
        self._code.append(lex)
        return len(self._code) - 1

    def append(self, lex: Lex) -> int:
        """Add lex at the end and return its position."""
        return self._grow(lex)

    def put(self, lex: Lex, place: int) -> None:
        """Replace the lexeme at an existing position."""
        if place < 0 or place >= len(self._code):
            raise IndexError("POLIZ:indefinite element of array")
        self._code[place] = lex

    def blank(self) -> int:
        """Reserve a slot to be filled later and return its position."""
        return self._grow(Lex())

    def __len__(self) -> int:
        return len(self._code)

    def __getitem__(self, index: int) -> Lex:
        if index < 0 or index >= self.max_size:
            raise IndexError("POLIZ:out of array")
        if index >= len(self._code):
            raise IndexError("POLIZ:indefinite element of array")
        return self._code[index]

    def __iter__(self) -> Iterator[Lex]:
        return iter(self._code)

    def dump(self, table: IdentTable) -> str:
        """Return a numbered listing of the code, one lexeme per line."""
        return "".join(
            f"{index})  {lex.describe(table)}\n" for index, lex in enumerate(self._code)
        )

    def resolve_labels(self, labels: LabelTable) -> None:
        """Fill every goto's target slot with the position of its label."""
        for name, slot in labels.jumps.items():
            target = labels.labels.get(name)
            if target is not None:
                self._code[slot] = Lex(LexType.POLIZ_LABEL, target)