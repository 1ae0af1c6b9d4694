import pytest

from calcpad.engine.expression import (
    append_numeric_token,
    append_operator,
    find_last_operator_index,
    reset,
    split_current_term,
)
from calcpad.models.calculator import CalculatorState, LastInputKind


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("12", -1),
        ("12+3", 2),
        ("12+(-3)", 2),
        ("(-3)", -1),
        ("-3", 0),
        ("4×5÷6", 3),
        ("7-(-2)", 1),
    ],
)
def test_find_last_operator_index_skips_negation_marker(expression: str, expected: int) -> None:
    assert find_last_operator_index(expression) == expected


def test_split_current_term() -> None:
    assert split_current_term("12+(-3)") == ("12+", "(-3)")
    assert split_current_term("12+") == ("12+", "")
    assert split_current_term("0") == ("", "0")


@pytest.mark.parametrize(
    ("value", "expression", "expected"),
    [
        ("5", "0", "5"),
        ("0", "0", "0"),
        ("0", "5+0", "5+0"),
        ("7", "5+0", "5+7"),
        ("3", "12", "123"),
        (".", "0", "0."),
        (".", "1.5", "1.5"),
        (".", "5+", "5+"),
        (".", "5×(-2)", "5×(-2)"),
        ("%", "50", "50%"),
        ("%", "50%", "50%"),
        ("%", "5+", "5+"),
        ("%", "(-5)", "(-5)"),
        ("3", "2+(-4)", "2+(-4)×3"),
        ("0", "(-4)", "(-4)×0"),
        ("+/-", "12", "(-12)"),
        ("+/-", "3+12", "3+(-12)"),
        ("+/-", "3+(-12)", "3+12"),
        ("+/-", "3+", "3+"),
        ("+/-", "50%", "(-50%)"),
    ],
)
def test_append_numeric_token(value: str, expression: str, expected: str) -> None:
    assert append_numeric_token(value, expression) == expected


@pytest.mark.parametrize("value", [".", "%"])
def test_repeated_decimal_or_percent_is_suppressed(value: str) -> None:
    once = append_numeric_token(value, "12")
    twice = append_numeric_token(value, once)

    assert twice == once


@pytest.mark.parametrize("expression", ["7", "12+3.5", "4×50%", "2-(-9)", "0"])
def test_double_negation_is_identity(expression: str) -> None:
    negated = append_numeric_token("+/-", expression)

    assert negated != expression
    assert append_numeric_token("+/-", negated) == expression


def test_negating_a_negative_result_keeps_leading_minus() -> None:
    assert append_numeric_token("+/-", "-3") == "-(-3)"


def test_append_operator_appends_after_number() -> None:
    assert append_operator("+", LastInputKind.number, "12") == "12+"
    assert append_operator("×", LastInputKind.none, "0") == "0×"


@pytest.mark.parametrize("first", ["÷", "×", "-", "+"])
@pytest.mark.parametrize("second", ["÷", "×", "-", "+"])
def test_consecutive_operators_keep_only_the_last(first: str, second: str) -> None:
    expression = append_operator(first, LastInputKind.none, "9")

    assert append_operator(second, LastInputKind.operator, expression) == "9" + second


def test_reset_returns_initial_state() -> None:
    state = reset()

    assert state == CalculatorState(expression="0", lastKind=LastInputKind.none, displayedExpression="")
    assert state == CalculatorState()
