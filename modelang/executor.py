"""Executor that runs reverse Polish program code."""

from __future__ import annotations

import math
import operator
import re
import sys
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, TextIO, TypeVar

from .lexemes import ExecutionError, Ident, IdentTable, Lex, LexType
from .poliz import Poliz

T = LexType
_Item = TypeVar("_Item")

_STACK_LIMIT = 100
UNINITIALISED = "Ошибка! Неинициализированная переменная."

_INT_INPUT = re.compile(r"[+-]?[0-9]+")
_REAL_INPUT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_PUSHED = frozenset({T.INT_NUM, T.REAL_NUM, T.STR, T.POLIZ_ADDRESS, T.POLIZ_LABEL})
_NUMERIC = frozenset({T.INT, T.REAL})
_LITERAL_KINDS = {T.INT_NUM: T.INT, T.REAL_NUM: T.REAL, T.STR: T.STRING}


def _truncating_div(left: int, right: int) -> int:
    if right == 0:
        raise ExecutionError("division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


def _real_div(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _to_int(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


_ARITHMETIC: dict[LexType, tuple[Callable[[int, int], int], Callable[[float, float], float]]] = {
    T.PLUS: (operator.add, operator.add),
    T.MINUS: (operator.sub, operator.sub),
    T.TIMES: (operator.mul, operator.mul),
    T.SLASH: (_truncating_div, _real_div),
}

_ORDERINGS: dict[LexType, Callable[[Any, Any], bool]] = {
    T.LSS: operator.lt,
    T.LEQ: operator.le,
    T.GTR: operator.gt,
    T.GEQ: operator.ge,
    T.NEQ: operator.ne,
}

_COMPARISONS: dict[LexType, Callable[[Any, Any], bool]] = {**_ORDERINGS, T.EQ: operator.eq}


class _Stack(Generic[_Item]):
    """A stack holding at most a fixed number of items."""

    def __init__(self, limit: int = _STACK_LIMIT) -> None:
        self._limit = limit
        self._items: list[_Item] = []

    def push(self, item: _Item) -> None:
        if len(self._items) >= self._limit:
            raise ExecutionError("Stack_is_full")
        self._items.append(item)

    def pop(self) -> _Item:
        if not self._items:
            raise ExecutionError("Stack_is_empty")
        return self._items.pop()


@dataclass(frozen=True)
class _Operand:
    """The value an operand lexeme stands for."""

    kind: LexType | None
    value: Any
    in_table: bool


def _ident_value(ident: Ident) -> Any:
    if ident.type == T.INT:
        return ident.int_value
    if ident.type == T.REAL:
        return ident.real_value
    if ident.type == T.STRING:
        return ident.str_value
    return None


def _matches(op: LexType, left: _Operand, right: _Operand) -> bool:
    """Tell whether op has a rule for this pair of operands."""
    numeric = left.kind in _NUMERIC and right.kind in _NUMERIC
    strings = left.kind == T.STRING and right.kind == T.STRING
    if op == T.EQ:
        return numeric or strings
    if op == T.PLUS:
        return numeric or (strings and left.in_table == right.in_table)
    if not left.in_table and right.in_table:
        # A literal on the left of a variable never pairs two reals or two strings.
        return numeric and not (left.kind == T.REAL and right.kind == T.REAL)
    return numeric or (strings and op in _ORDERINGS)


class Executor:
    """Runs reverse Polish code against an identifier table."""

    def __init__(
        self,
        table: IdentTable,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.table = table
        self._stdin = stdin
        self._stdout = stdout
        self._pending: deque[str] = deque()

    @property
    def _input(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def _output(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def execute(self, poliz: Poliz) -> None:
        """Run the code from its first lexeme to its end."""
        args: _Stack[Lex] = _Stack()
        index = 0
        size = len(poliz)
        while index < size:
            lex = poliz[index]
            kind = lex.type
            if kind in _PUSHED:
                args.push(lex)
            elif kind == T.ID:
                if not self.table[lex.int_value].assigned:
                    raise ExecutionError(UNINITIALISED)
                args.push(lex)
            elif kind == T.NOT:
                value = args.pop()
                args.push(replace(value, int_value=0 if value.int_value else 1))
            elif kind in (T.OR, T.AND):
                right = args.pop()
                left = args.pop()
                if kind == T.OR:
                    truth = bool(left.int_value or right.int_value)
                else:
                    truth = bool(left.int_value and right.int_value)
                args.push(replace(left, int_value=int(truth)))
            elif kind == T.POLIZ_GO:
                index = args.pop().int_value - 1
            elif kind == T.POLIZ_FGO:
                target = args.pop().int_value
                if not args.pop().int_value:
                    index = target - 1
            elif kind == T.WRITE:
                self._write(args.pop())
            elif kind == T.READ:
                self._read(args.pop())
            elif kind in _ARITHMETIC or kind in _COMPARISONS:
                right = args.pop()
                left = args.pop()
                args.push(self._binary(kind, left, right))
            elif kind == T.ASSIGN:
                value = args.pop()
                address = args.pop()
                args.push(self._assign(address, value))
            elif kind == T.POLIZ_UN_MINUS:
                args.push(self._negate(args.pop()))
            index += 1

    # operations

    def _resolve(self, lex: Lex) -> _Operand:
        if lex.type == T.ID:
            ident = self.table[lex.int_value]
            return _Operand(ident.type, _ident_value(ident), True)
        kind = _LITERAL_KINDS.get(lex.type)
        if kind == T.INT:
            return _Operand(kind, lex.int_value, False)
        if kind == T.REAL:
            return _Operand(kind, lex.real_value, False)
        if kind == T.STRING:
            return _Operand(kind, lex.str_value, False)
        return _Operand(None, None, False)

    def _binary(self, op: LexType, left_lex: Lex, right_lex: Lex) -> Lex:
        left = self._resolve(left_lex)
        right = self._resolve(right_lex)
        if not _matches(op, left, right):
            return right_lex if op == T.PLUS else replace(right_lex, type=T.INT_NUM)
        if op in _COMPARISONS:
            truth = _COMPARISONS[op](left.value, right.value)
            return replace(right_lex, type=T.INT_NUM, int_value=int(truth))
        if left.kind == T.STRING:
            return replace(right_lex, type=T.STR, str_value=right.value + left.value)
        int_op, real_op = _ARITHMETIC[op]
        if left.kind == T.INT and right.kind == T.INT:
            return replace(right_lex, type=T.INT_NUM, int_value=int_op(left.value, right.value))
        result = real_op(float(left.value), float(right.value))
        return replace(right_lex, type=T.REAL_NUM, real_value=result)

    def _assign(self, address: Lex, value: Lex) -> Lex:
        target = self.table[address.int_value]
        result = value
        if value.type == T.INT_NUM:
            if target.type == T.INT:
                target.int_value = value.int_value
            elif target.type == T.REAL:
                target.real_value = float(value.int_value)
                result = replace(value, type=T.REAL_NUM)
        elif value.type == T.REAL_NUM:
            target.real_value = value.real_value
            result = replace(value, type=T.INT_NUM)
        elif value.type == T.STR:
            target.str_value = value.str_value
        elif value.type == T.ID:
            source = self.table[value.int_value]
            if source.type == T.INT:
                target.int_value = source.int_value
                result = replace(value, type=T.INT_NUM, int_value=source.int_value)
            elif source.type == T.REAL:
                target.real_value = source.real_value
                result = replace(
                    value, type=T.REAL_NUM, int_value=_to_int(source.real_value)
                )
            elif source.type == T.STRING:
                target.str_value = source.str_value
                result = replace(value, type=T.STR, str_value=source.str_value)
        target.assigned = True
        return result

    def _negate(self, lex: Lex) -> Lex:
        if lex.type == T.INT_NUM:
            return replace(lex, int_value=-lex.int_value)
        if lex.type == T.REAL_NUM:
            return replace(lex, real_value=-lex.real_value)
        if lex.type == T.ID:
            ident = self.table[lex.int_value]
            if ident.type == T.INT:
                ident.int_value = -ident.int_value
            elif ident.type == T.REAL:
                ident.real_value = -ident.real_value
        return lex

    # input and output

    def _format(self, lex: Lex) -> str | None:
        if lex.type == T.INT_NUM:
            return str(lex.int_value)
        if lex.type == T.REAL_NUM:
            return f"{lex.real_value:g}"
        if lex.type == T.STR:
            return lex.str_value
        if lex.type == T.ID:
            ident = self.table[lex.int_value]
            if ident.type == T.INT:
                return str(ident.int_value)
            if ident.type == T.REAL:
                return f"{ident.real_value:g}"
            if ident.type == T.STRING:
                return ident.str_value
        return None

    def _write(self, lex: Lex) -> None:
        text = self._format(lex)
        if text is not None:
            print(text, file=self._output)

    def _next_token(self) -> str:
        while not self._pending:
            line = self._input.readline()
            if not line:
                raise ExecutionError("unexpected end of input")
            self._pending.extend(line.split())
        return self._pending.popleft()

    def _read(self, address: Lex) -> None:
        ident = self.table[address.int_value]
        if ident.type == T.INT:
            token = self._next_token()
            if not _INT_INPUT.fullmatch(token):
                raise ExecutionError(f"invalid integer input: {token}")
            ident.int_value = int(token)
        elif ident.type == T.STRING:
            ident.str_value = self._next_token()
        elif ident.type == T.REAL:
            token = self._next_token()
            if not _REAL_INPUT.fullmatch(token):
                raise ExecutionError(f"invalid real input: {token}")
            ident.real_value = float(token)
        ident.assigned = True