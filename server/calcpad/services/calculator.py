from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from calcpad.core.config import get_settings
from calcpad.core.exceptions import AppError
from calcpad.engine import evaluator
from calcpad.engine.evaluator import ERROR_DISPLAY, EvaluationError
from calcpad.engine.expression import append_numeric_token, append_operator, reset
from calcpad.engine.keypad import KeyKind, classify_key
from calcpad.models.calculator import (
    CalculatorResult,
    CalculatorState,
    EvaluationOk,
    EvaluationResult,
    LastInputKind,
)

logger = logging.getLogger("calcpad.calculator")


class CalculatorError(AppError):
    status_code = 400
    error_type = "CALCULATOR_ERROR"


class InvalidKeyError(AppError):
    status_code = 400
    error_type = "INVALID_KEY"


class ExpressionTooLongError(AppError):
    status_code = 400
    error_type = "EXPRESSION_TOO_LONG"


def _default_fraction_digits() -> int:
    return get_settings().result_fraction_digits


def _default_max_length() -> int:
    return get_settings().max_expression_length


@dataclass
class CalculatorService:
    """
    Drives the expression engine from keypad input.

    Owns the caller side of the engine contract: which state fields change
    after each kind of key, and what happens after an evaluation error.
    """

    fraction_digits: int = field(default_factory=_default_fraction_digits)
    max_expression_length: int = field(default_factory=_default_max_length)

    def press(self, state: CalculatorState, key: str) -> CalculatorState:
        kind = classify_key(key)
        if kind is None:
            raise InvalidKeyError(f"Unsupported key {key!r}.", details={"key": key})

        if kind == KeyKind.clear:
            return reset()

        # an error result is terminal until cleared
        if state.expression == ERROR_DISPLAY:
            return state

        if kind == KeyKind.equals:
            return self._equals(state)

        if kind == KeyKind.operator:
            expression = append_operator(key, state.lastKind, state.expression)
            self._check_length(expression)
            return CalculatorState(
                expression=expression,
                lastKind=LastInputKind.operator,
                displayedExpression="",
            )

        expression = append_numeric_token(key, state.expression)
        if expression == state.expression:
            return state
        self._check_length(expression)
        return CalculatorState(
            expression=expression,
            lastKind=LastInputKind.number,
            displayedExpression="",
        )

    def press_many(self, state: CalculatorState, keys: Iterable[str]) -> CalculatorState:
        for key in keys:
            state = self.press(state, key)
        return state

    def evaluate_state(self, state: CalculatorState) -> EvaluationResult:
        self._check_length(state.expression)
        return self._evaluate(state.expression, state.lastKind)

    def evaluate(self, expression: str) -> CalculatorResult:
        cleaned = expression.strip()
        if not cleaned:
            raise CalculatorError("Expression cannot be empty.")

        if len(cleaned) > self.max_expression_length:
            raise CalculatorError(f"Expression exceeds {self.max_expression_length} characters.")

        outcome = self._evaluate(cleaned, LastInputKind.none)
        if not isinstance(outcome, EvaluationOk):
            raise CalculatorError(f"Invalid arithmetic expression: {outcome.reason}")

        return CalculatorResult(expression=expression, result=outcome.value)

    def _equals(self, state: CalculatorState) -> CalculatorState:
        outcome = self._evaluate(state.expression, state.lastKind)
        result = outcome.value if isinstance(outcome, EvaluationOk) else ERROR_DISPLAY
        return CalculatorState(
            expression=result,
            lastKind=LastInputKind.none,
            displayedExpression=state.expression,
        )

    def _evaluate(self, expression: str, last_kind: LastInputKind) -> EvaluationResult:
        outcome = evaluator.evaluate(expression, last_kind, fraction_digits=self.fraction_digits)
        if isinstance(outcome, EvaluationOk):
            logger.info(
                "calculator.evaluate",
                extra={"expression": expression, "result": outcome.value},
            )
        else:
            logger.warning(
                "calculator.error",
                extra={"expression": expression, "reason": outcome.reason},
            )
        return outcome

    def _check_length(self, expression: str) -> None:
        if len(expression) > self.max_expression_length:
            raise ExpressionTooLongError(
                f"Expression exceeds {self.max_expression_length} characters.",
                details={"length": len(expression)},
            )


def describe_evaluable(expression: str, last_kind: LastInputKind = LastInputKind.none) -> str:
    """Arithmetic form handed to the parser, e.g. ``12+(-3)*4`` for ``12+(-3)×4``."""
    try:
        return evaluator.render(evaluator.to_evaluable(expression, last_kind))
    except EvaluationError as exc:
        raise CalculatorError(f"Invalid arithmetic expression: {exc}") from exc
