"""
Evaluation of display expressions.

The display syntax (``×``, ``÷``, ``%`` and ``(-N)`` negation groups) is
tokenized, percentages are folded into plain numbers, and the resulting token
stream is evaluated by a small recursive-descent parser restricted to
``+ - * / ( )`` and numeric literals. Nothing is ever passed to ``eval``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from calcpad.models.calculator import (
    EvaluationFailure,
    EvaluationOk,
    EvaluationResult,
    LastInputKind,
)

ERROR_DISPLAY = "Error"
DEFAULT_FRACTION_DIGITS = 8

NUMBER = "number"
OPERATOR = "operator"
LPAREN = "lparen"
RPAREN = "rparen"
PERCENT = "percent"

_DISPLAY_OPERATORS = {"×": "*", "÷": "/", "*": "*", "/": "/", "+": "+", "-": "-"}


class EvaluationError(ValueError):
    """Raised when an expression cannot be turned into a finite number."""


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    value: float = 0.0
    percent: bool = False

    def __str__(self) -> str:
        if self.kind == NUMBER and self.percent:
            return repr(self.value)
        return self.text


def tokenize(expression: str) -> List[Token]:
    tokens: list[Token] = []
    index = 0
    length = len(expression)
    while index < length:
        char = expression[index]
        if char.isspace():
            index += 1
            continue
        if char.isdigit() or char == ".":
            start = index
            while index < length and (expression[index].isdigit() or expression[index] == "."):
                index += 1
            text = expression[start:index]
            try:
                value = float(text)
            except ValueError as exc:
                raise EvaluationError(f"Malformed number {text!r}.") from exc
            tokens.append(Token(NUMBER, text, value))
            continue
        if char in _DISPLAY_OPERATORS:
            tokens.append(Token(OPERATOR, _DISPLAY_OPERATORS[char]))
        elif char == "(":
            tokens.append(Token(LPAREN, char))
        elif char == ")":
            tokens.append(Token(RPAREN, char))
        elif char == "%":
            tokens.append(Token(PERCENT, char))
        else:
            raise EvaluationError(f"Unexpected character {char!r}.")
        index += 1
    return tokens


def _matching_lparen(tokens: List[Token]) -> int:
    depth = 0
    for index in range(len(tokens) - 1, -1, -1):
        kind = tokens[index].kind
        if kind == RPAREN:
            depth += 1
        elif kind == LPAREN:
            depth -= 1
            if depth == 0:
                return index
    raise EvaluationError("Unbalanced parentheses.")


def _positional(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _continue_decimal(scaled: Token, digits: Token) -> Token:
    text = _positional(scaled.value) + digits.text
    try:
        value = float(text)
    except ValueError as exc:
        raise EvaluationError(f"Malformed number {scaled.text + digits.text!r}.") from exc
    return Token(NUMBER, scaled.text + digits.text, value, percent=True)


def fold_percentages(tokens: List[Token]) -> List[Token]:
    """Replace ``N%`` by ``N/100`` and scale a closed group followed by ``%``.

    Digits typed right after ``N%`` extend the rewritten decimal, so ``50%3``
    reads as ``0.53``.
    """
    folded: list[Token] = []
    for token in tokens:
        if token.kind != PERCENT:
            previous = folded[-1] if folded else None
            if token.kind == NUMBER and previous is not None and previous.kind == NUMBER and previous.percent:
                folded[-1] = _continue_decimal(previous, token)
            else:
                folded.append(token)
            continue

        previous = folded[-1] if folded else None
        if previous is None or previous.percent:
            raise EvaluationError("Percent sign without a value.")
        if previous.kind == NUMBER:
            folded[-1] = Token(NUMBER, previous.text + "%", previous.value / 100, percent=True)
        elif previous.kind == RPAREN:
            folded.insert(_matching_lparen(folded), Token(LPAREN, "("))
            folded.extend(
                [
                    Token(OPERATOR, "/"),
                    Token(NUMBER, "100", 100.0),
                    Token(RPAREN, ")", percent=True),
                ]
            )
        else:
            raise EvaluationError("Percent sign without a value.")
    return folded


def to_evaluable(expression: str, last_kind: LastInputKind = LastInputKind.none) -> List[Token]:
    if last_kind == LastInputKind.operator:
        expression = expression[:-1]
    return fold_percentages(tokenize(expression))


def render(tokens: List[Token]) -> str:
    return "".join(str(token) for token in tokens)


def _checked(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        raise EvaluationError("Result is out of range.")
    return value


class _Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._position = 0

    def parse(self) -> float:
        if not self._tokens:
            raise EvaluationError("Expression is empty.")
        value = self._expression()
        if self._peek() is not None:
            raise EvaluationError(f"Unexpected {self._peek().text!r}.")
        return value

    def _peek(self) -> Token | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise EvaluationError("Unexpected end of expression.")
        self._position += 1
        return token

    def _match_operator(self, *symbols: str) -> str | None:
        token = self._peek()
        if token is not None and token.kind == OPERATOR and token.text in symbols:
            self._position += 1
            return token.text
        return None

    def _expression(self) -> float:
        value = self._term()
        while True:
            symbol = self._match_operator("+", "-")
            if symbol is None:
                return value
            right = self._term()
            value = _checked(value + right if symbol == "+" else value - right)

    def _term(self) -> float:
        value = self._unary()
        while True:
            symbol = self._match_operator("*", "/")
            if symbol is None:
                return value
            right = self._unary()
            if symbol == "*":
                value = _checked(value * right)
            elif right == 0:
                raise EvaluationError("Division by zero.")
            else:
                value = _checked(value / right)

    def _unary(self) -> float:
        sign = 1.0
        while True:
            symbol = self._match_operator("+", "-")
            if symbol is None:
                return sign * self._primary()
            if symbol == "-":
                sign = -sign

    def _primary(self) -> float:
        token = self._advance()
        if token.kind == NUMBER:
            return _checked(token.value)
        if token.kind == LPAREN:
            value = self._expression()
            closing = self._advance()
            if closing.kind != RPAREN:
                raise EvaluationError("Unbalanced parentheses.")
            return value
        raise EvaluationError(f"Unexpected {token.text!r}.")


def compute(tokens: List[Token]) -> float:
    try:
        return _Parser(tokens).parse()
    except RecursionError as exc:
        raise EvaluationError("Expression is nested too deeply.") from exc


def format_result(value: float, fraction_digits: int = DEFAULT_FRACTION_DIGITS) -> str:
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.{fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def evaluate(
    expression: str,
    last_kind: LastInputKind = LastInputKind.none,
    *,
    fraction_digits: int = DEFAULT_FRACTION_DIGITS,
) -> EvaluationResult:
    try:
        value = compute(to_evaluable(expression, last_kind))
    except EvaluationError as exc:
        return EvaluationFailure(reason=str(exc))
    return EvaluationOk(value=format_result(value, fraction_digits))
