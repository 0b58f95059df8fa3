"""Recursive-descent parser that checks a program and builds its reverse Polish code."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Generic, TypeVar

from .lexemes import IdentTable, Lex, LexType, ParseError
from .poliz import LabelTable, Poliz
from .scanner import Scanner

T = LexType
_Item = TypeVar("_Item")

_STACK_LIMIT = 100

_INTS = frozenset({T.INT, T.INT_NUM})
_REALS = frozenset({T.REAL, T.REAL_NUM})
_NUMBERS = _INTS | _REALS
_STRINGS = frozenset({T.STRING, T.STR})
_COMPARISONS = frozenset({T.EQ, T.NEQ, T.GEQ, T.GTR, T.LSS, T.LEQ})
_STRING_OPERATIONS = _COMPARISONS | {T.PLUS}
_LITERALS_ON_LEFT = frozenset({T.INT_NUM, T.REAL_NUM, T.STR})
_DECLARATION_TYPES = frozenset({T.INT, T.REAL, T.STRING})
_STATEMENT_STARTS = frozenset({
    T.IF, T.WHILE, T.READ, T.WRITE, T.LBRACE, T.ID, T.NOT, T.PLUS,
    T.MINUS, T.FOR, T.GOTO, T.LPAREN, T.INT_NUM, T.STR,
})
_EXPRESSION_STARTS = frozenset({
    T.INT_NUM, T.REAL_NUM, T.STR, T.LPAREN, T.NOT, T.PLUS, T.MINUS,
})
_OPERANDS = frozenset({T.ID, T.INT_NUM, T.REAL_NUM, T.STR})
_UNARY = frozenset({T.NOT, T.PLUS, T.MINUS})

_INCORRECT_PROGRAM = "Ошибка! Некорректная программа."


class _BoundedStack(Generic[_Item]):
    """A stack holding at most a fixed number of items."""

    def __init__(self, limit: int = _STACK_LIMIT) -> None:
        self._limit = limit
        self._items: list[_Item] = []

    def push(self, item: _Item) -> None:
        if len(self._items) >= self._limit:
            raise ParseError("Stack_is_full")
        self._items.append(item)

    def pop(self) -> _Item:
        if not self._items:
            raise ParseError("Stack_is_empty")
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    def __bool__(self) -> bool:
        return bool(self._items)


class Parser:
    """Checks a program and translates it into reverse Polish code."""

    def __init__(self, text: str, table: IdentTable | None = None) -> None:
        self.table = table if table is not None else IdentTable()
        self._scanner = Scanner(text, self.table)
        self.poliz = Poliz()
        self.labels = LabelTable()
        self._lex = Lex()
        self._decl_type = T.NULL
        self._target = 0
        self._pending_id = False
        self._buf = Lex()
        self._identifier = Lex()
        self._names: _BoundedStack[int] = _BoundedStack()
        self._types: _BoundedStack[LexType] = _BoundedStack()

    def analyze(self) -> Poliz:
        """Parse the whole program, resolve goto labels and return the code."""
        self._next()
        self._program()
        self.labels.check()
        self.poliz.resolve_labels(self.labels)
        return self.poliz

    # helpers

    def _next(self) -> None:
        self._lex = self._scanner.next_lex()

    def _at(self, kind: LexType) -> bool:
        return self._lex.type == kind

    def _expect(self, kind: LexType, message: str) -> None:
        if not self._at(kind):
            raise ParseError(message)
        self._next()

    def _unexpected(self) -> ParseError:
        return ParseError("unexpected lexeme", self._lex)

    def _expect_lex(self, kind: LexType) -> None:
        if not self._at(kind):
            raise self._unexpected()
        self._next()

    def _emit(self, lex: Lex) -> None:
        self.poliz.append(replace(lex))

    def _emit_kind(self, kind: LexType, value: int = 0) -> None:
        self.poliz.append(Lex(kind, value))

    def _fill(self, slot: int, target: int | None = None) -> None:
        place = len(self.poliz) if target is None else target
        self.poliz.put(Lex(T.POLIZ_LABEL, place), slot)

    # program and descriptions

    def _program(self) -> None:
        self._expect(
            T.PROGRAM,
            "Ошибка! Программа на модельном языке должна начинаться со слова program.",
        )
        self._expect(
            T.LBRACE,
            "Ошибка! После слова program должна идти открывающая фигурная скобка.",
        )
        self._descriptions()
        self._statements()
        self._expect(T.RBRACE, _INCORRECT_PROGRAM)
        if not self._at(T.EOF):
            raise ParseError("Ошибка! После тела программы не должно ничего идти.")

    def _descriptions(self) -> None:
        while self._lex.type in _DECLARATION_TYPES:
            self._description()
            self._expect(T.SEMICOLON, "Ошибка! После описания должна идти точка с запятой.")

    def _description(self) -> None:
        self._decl_type = self._lex.type
        self._next()
        self._names.clear()
        self._variable()
        while self._at(T.COMMA):
            self._next()
            self._variable()
        self._declare(self._decl_type)

    def _variable(self) -> None:
        if not self._at(T.ID):
            raise ParseError("Ошибка! В описании ожидался идентификатор.")
        self._names.push(self._lex.int_value)
        self._target = self._lex.int_value
        self._next()
        if self._at(T.ASSIGN):
            self._next()
            self._constant()

    def _constant(self) -> None:
        ident = self.table[self._target]
        if self._at(T.STR):
            if self._decl_type != T.STRING:
                raise ParseError(
                    "Ошибка! Попытка инициализировать переменную типа int или real "
                    "строковой константой."
                )
            ident.str_value = self._lex.str_value
            ident.assigned = True
            self._next()
            return
        sign = 1
        if self._lex.type in (T.PLUS, T.MINUS):
            if self._at(T.MINUS):
                sign = -1
            self._next()
        if self._at(T.INT_NUM):
            if self._decl_type == T.STRING:
                raise ParseError(
                    "Ошибка! Попытка инициализировать переменную типа string "
                    "числовой константой."
                )
            if self._decl_type == T.INT:
                ident.int_value = sign * self._lex.int_value
            elif self._decl_type == T.REAL:
                ident.real_value = float(sign * self._lex.int_value)
            ident.assigned = True
            self._next()
        elif self._at(T.REAL_NUM):
            if self._decl_type != T.REAL:
                raise ParseError(
                    "Ошибка! Попытка инициализировать вещественной константой "
                    "переменную не типа real."
                )
            ident.real_value = sign * self._lex.real_value
            ident.assigned = True
            self._next()
        else:
            raise ParseError("Ошибка! Встретилось некорректное описание.")

    # statements

    def _statements(self) -> None:
        while self._lex.type in _STATEMENT_STARTS:
            self._statement()

    def _statement(self) -> None:
        kind = self._lex.type
        if kind == T.IF:
            self._if()
        elif kind == T.WHILE:
            self._while()
        elif kind == T.READ:
            self._read()
        elif kind == T.WRITE:
            self._write()
        elif kind == T.LBRACE:
            self._next()
            self._statements()
            self._expect_lex(T.RBRACE)
        elif kind == T.FOR:
            self._for()
        elif kind == T.GOTO:
            self._goto()
        elif kind == T.ID:
            self._identifier_statement()
        elif kind in _EXPRESSION_STARTS:
            self._expression()
            if not self._at(T.SEMICOLON):
                raise ParseError(_INCORRECT_PROGRAM)
            self._emit(self._lex)
            self._next()

    def _if(self) -> None:
        self._next()
        self._expect(
            T.LPAREN,
            "Ошибка! После служебного слова if ожидалась открывающая круглая скобка.",
        )
        self._expression()
        if self._types.pop() not in _INTS:
            raise ParseError(
                "Ошибка! В скобочках после оператора if может быть только "
                "целочисленное выражение."
            )
        self._expect(
            T.RPAREN,
            "Ошибка! Вы забыли поставить закрывающую круглую скобку в операторе if.",
        )
        false_jump = self.poliz.blank()
        self._emit_kind(T.POLIZ_FGO)
        self._statement()
        end_jump = self.poliz.blank()
        self._emit_kind(T.POLIZ_GO)
        self._fill(false_jump)
        self._expect(T.ELSE, "Ошибка! В операторе if отсутствует else-часть.")
        self._statement()
        self._fill(end_jump)

    def _while(self) -> None:
        self._next()
        self._expect(
            T.LPAREN,
            "Ошибка! После служебного слова while ожидалась открывающая круглая скобка.",
        )
        start = len(self.poliz)
        self._expression()
        exit_jump = self.poliz.blank()
        self._emit_kind(T.POLIZ_FGO)
        self._expect(
            T.RPAREN, "Ошибка! Ожидалась закрывабщая скобка в описании цикла while."
        )
        self._statement()
        self._emit_kind(T.POLIZ_LABEL, start)
        self._emit_kind(T.POLIZ_GO)
        self._fill(exit_jump)

    def _read(self) -> None:
        self._next()
        self._expect(
            T.LPAREN,
            "Ошибка! После служебного слова read ожидалась открывающая круглая скобка.",
        )
        if not self._at(T.ID):
            raise ParseError(
                "Ошибка! В качестве параметра оператора read может выступать "
                "только идентификатор."
            )
        self._check_id(self._lex.int_value)
        self._emit_kind(T.POLIZ_ADDRESS, self._lex.int_value)
        self._emit_kind(T.READ)
        self._next()
        self._expect(
            T.RPAREN,
            "Ошибка! После служебного слова read ожидался идентификатор, "
            "заключенный в круглые скобки.",
        )
        if not self._at(T.SEMICOLON):
            raise ParseError(
                "Ошибка! Вы забыли поставить точку с запятой после оператора read."
            )
        self._emit(self._lex)
        self._next()

    def _write(self) -> None:
        self._next()
        self._expect(
            T.LPAREN,
            "Ошибка! После служебного слова write ожидалась открывающая круглая скобка.",
        )
        self._expression()
        while self._at(T.COMMA):
            self._next()
            self._expression()
        self._expect_lex(T.RPAREN)
        self._expect(
            T.SEMICOLON,
            "Ошибка! Вы забыли поставить точку с запятой после оператора write.",
        )
        self._emit_kind(T.WRITE)

    def _for(self) -> None:
        self._next()
        self._expect_lex(T.LPAREN)
        if not self._at(T.SEMICOLON):
            self._expression()
        if not self._at(T.SEMICOLON):
            raise self._unexpected()
        self._emit_kind(T.SEMICOLON)
        self._next()

        condition = len(self.poliz)
        if not self._at(T.SEMICOLON):
            self._expression()
            if self._types.pop() not in _INTS:
                raise ParseError(
                    "Ошибка! В качестве условия завершения цикла может использоваться "
                    "только целочисленное выражение."
                )
        if not self._at(T.SEMICOLON):
            raise ParseError("Ошибка! Ожидалась запятая в описании цикла for.")
        self._emit_kind(T.SEMICOLON)
        self._next()

        exit_jump = self.poliz.blank()
        self._emit_kind(T.POLIZ_FGO)
        body_jump = self.poliz.blank()
        self._emit_kind(T.POLIZ_GO)

        step = len(self.poliz)
        if not self._at(T.RPAREN):
            self._expression()
        self._expect(T.RPAREN, "Ошибка! Ожидалась закрывающая скобка в описании цикла for.")
        self._emit_kind(T.POLIZ_LABEL, condition)
        self._emit_kind(T.POLIZ_GO)
        self._fill(body_jump)

        self._statement()
        self._emit_kind(T.POLIZ_LABEL, step)
        self._emit_kind(T.POLIZ_GO)
        self._fill(exit_jump)

    def _goto(self) -> None:
        self._next()
        if not self._at(T.ID):
            raise ParseError("Ошибка! После goto должен идти идентификатор.")
        self.labels.add_jump(self.table[self._lex.int_value].name, len(self.poliz))
        self._next()
        self._expect(
            T.SEMICOLON,
            "Ошибка! Вы забыли поставить точку с запятой после оператора GOTO.",
        )
        self.poliz.blank()
        self._emit_kind(T.POLIZ_GO)

    def _identifier_statement(self) -> None:
        self._pending_id = True
        self._identifier = self._lex
        self._target = self._lex.int_value
        self._next()
        if self._at(T.COLON):
            self._next()
            self.labels.define(self.table[self._target].name, len(self.poliz))
            self._pending_id = False
            self._statement()
            return
        self._check_id(self._target)
        self._expression()
        if self._at(T.SEMICOLON):
            self._emit_kind(T.SEMICOLON)
            self._next()
        elif not self._at(T.ASSIGN):
            raise ParseError(_INCORRECT_PROGRAM)
        else:
            self._next()
            self._expression()
            self._emit_kind(T.ASSIGN)

    # expressions

    def _expression(self) -> None:
        if self._pending_id:
            # The identifier that started the statement is already read.
            self._buf = self._identifier
            self._pending_id = False
            if self._at(T.ASSIGN):
                self._emit_kind(T.POLIZ_ADDRESS, self._target)
                self._types.push(T.ASSIGN)
                self._next()
                self._identifier = Lex()
                self._buf = Lex()
                self._expression()
                self._check_op()
            elif not self._at(T.EOF):
                self._expr_or()
            else:
                raise ParseError("Ошибка! Неправильная структура программы!")
            return
        if not self._at(T.ID):
            self._expr_or()
            return
        self._check_id(self._lex.int_value)
        self._buf = self._lex
        self._next()
        if self._at(T.ASSIGN):
            self._emit_kind(T.POLIZ_ADDRESS, self._buf.int_value)
            self._types.push(T.ASSIGN)
            self._next()
            self._buf = Lex()
            self._expression()
            self._check_op()
        elif not self._at(T.EOF):
            self._expr_or()
        else:
            raise ParseError("Ошибка! Неправильная структура программы.")

    def _binary(self, operators: frozenset[LexType], operand: Callable[[], None]) -> None:
        operand()
        while self._lex.type in operators:
            self._types.push(self._lex.type)
            self._next()
            self._buf = Lex()
            operand()
            self._check_op()

    def _expr_or(self) -> None:
        self._binary(frozenset({T.OR}), self._expr_and)

    def _expr_and(self) -> None:
        self._binary(frozenset({T.AND}), self._expr_relation)

    def _expr_relation(self) -> None:
        self._binary(_COMPARISONS, self._expr_sum)

    def _expr_sum(self) -> None:
        self._binary(frozenset({T.PLUS, T.MINUS}), self._expr_product)

    def _expr_product(self) -> None:
        self._binary(frozenset({T.TIMES, T.SLASH}), self._expr_unary)

    def _expr_unary(self) -> None:
        first = self._lex.type
        unary = False
        if self._buf.type == T.NULL and first in _UNARY:
            self._next()
            unary = True
        self._operand()
        if first == T.NOT:
            self._check_not()
        elif first == T.PLUS and unary:
            self._emit_kind(T.POLIZ_UN_PLUS)
        elif first == T.MINUS and unary:
            self._emit_kind(T.POLIZ_UN_MINUS)

    def _operand(self) -> None:
        if self._buf.type != T.NULL:
            self._emit(self._buf)
            self._buf = Lex()
        elif self._lex.type in _OPERANDS:
            if self._at(T.ID):
                self._check_id(self._lex.int_value)
            else:
                self._types.push(self._lex.type)
            self._emit(self._lex)
            self._next()
        elif self._at(T.LPAREN):
            self._next()
            self._expression()
            self._expect_lex(T.RPAREN)

    # semantic checks

    def _declare(self, kind: LexType) -> None:
        while self._names:
            ident = self.table[self._names.pop()]
            if ident.declared:
                raise ParseError(
                    "Ошибка! В программе встретилась дважды описанная переменная."
                )
            ident.declared = True
            ident.type = kind

    def _check_id(self, index: int) -> None:
        ident = self.table[index]
        if not ident.declared:
            raise ParseError("Ошибка! В программе встретился не описанный идентификатор.")
        self._types.push(ident.type)

    def _check_not(self) -> None:
        if self._types.pop() not in _INTS:
            raise ParseError(
                "Ошибка! Операндом унарной операции not может быть только "
                "целочисленное выражение."
            )
        self._types.push(T.INT_NUM)
        self._emit_kind(T.NOT)

    def _check_op(self) -> None:
        right = self._types.pop()
        op = self._types.pop()
        left = self._types.pop()
        if left in _INTS and right in _INTS:
            result = T.INT
        elif left in _NUMBERS and right in _NUMBERS:
            result = T.REAL
        elif left in _STRINGS and right in _STRINGS:
            result = T.STRING
        else:
            raise ParseError("Ошибка! Несогласованы типы операндов в выражении.")
        if result == T.STRING and op not in _STRING_OPERATIONS:
            raise ParseError("Ошибка! Некорректная операция для операндов типа string.\t")
        if left == T.INT and right == T.REAL and op == T.ASSIGN:
            raise ParseError(
                "Ошибка! Попытка присвоить переменной типа int вещественное значние."
            )
        if left in _LITERALS_ON_LEFT and op == T.ASSIGN:
            raise ParseError(
                "Ошибка! Слева от оператора приваивания может находиться только "
                "идентификатор."
            )
        if op in _COMPARISONS:
            result = T.INT
        if op in (T.OR, T.AND) and (left not in _INTS or right not in _INTS):
            raise ParseError(
                "Ошибка! Операнды бинарных операций or и and могут быть только "
                "целочисленными."
            )
        self._types.push(result)
        self._emit_kind(op)