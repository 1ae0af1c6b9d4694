"""
Incremental editing of a display expression.

Every function here is pure: it receives the current expression (and, where
needed, the kind of the previous input) and returns the new expression.
"""

from __future__ import annotations

from calcpad.models.calculator import CalculatorState, LastInputKind

INITIAL_EXPRESSION = "0"
NEGATE = "+/-"
PERCENT = "%"
DECIMAL_POINT = "."
OPERATORS = ("÷", "×", "-", "+")


def find_last_operator_index(expression: str) -> int:
    """Index of the operator that starts the current term, or -1.

    A ``-`` right after ``(`` opens a negation group and is not an operator.
    """
    for index in range(len(expression) - 1, -1, -1):
        char = expression[index]
        if char in ("÷", "×", "+"):
            return index
        if char == "-" and (index == 0 or expression[index - 1] != "("):
            return index
    return -1


def split_current_term(expression: str) -> tuple[str, str]:
    last_operator_index = find_last_operator_index(expression)
    if last_operator_index == -1:
        return "", expression
    return expression[: last_operator_index + 1], expression[last_operator_index + 1 :]


def _is_suppressed(value: str, current_term: str, expression: str) -> bool:
    if value in (DECIMAL_POINT, PERCENT):
        return not current_term or value in current_term or expression.endswith(")")
    return False


def _toggle_negation(prefix: str, current_term: str, expression: str) -> str:
    if current_term.startswith("(-"):
        return prefix + current_term[2:-1]
    if current_term:
        return prefix + "(-" + current_term + ")"
    return expression


def append_numeric_token(value: str, expression: str) -> str:
    prefix, current_term = split_current_term(expression)

    if _is_suppressed(value, current_term, expression):
        return expression

    if value == NEGATE:
        return _toggle_negation(prefix, current_term, expression)

    if value == "0" and current_term == "0":
        return expression

    if value.isdigit() and value != "0" and current_term == "0":
        return prefix + value

    # a number typed after a closed group multiplies it
    if expression.endswith(")"):
        return expression + "×" + value

    return expression + value


def append_operator(operator: str, last_kind: LastInputKind, expression: str) -> str:
    if last_kind == LastInputKind.operator:
        return expression[:-1] + operator
    return expression + operator


def reset() -> CalculatorState:
    return CalculatorState(
        expression=INITIAL_EXPRESSION,
        lastKind=LastInputKind.none,
        displayedExpression="",
    )
