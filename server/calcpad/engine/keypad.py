from __future__ import annotations

from enum import Enum

from calcpad.engine.expression import DECIMAL_POINT, NEGATE, OPERATORS, PERCENT
from calcpad.models.calculator import KeypadLayout

CLEAR = "C"
EQUALS = "="

KEYPAD = KeypadLayout(
    function=[CLEAR, NEGATE, PERCENT],
    number=[
        ["7", "8", "9"],
        ["4", "5", "6"],
        ["1", "2", "3"],
        ["0", DECIMAL_POINT],
    ],
    operator=[*OPERATORS, EQUALS],
)


class KeyKind(str, Enum):
    numeric = "numeric"
    operator = "operator"
    clear = "clear"
    equals = "equals"


def classify_key(key: str) -> KeyKind | None:
    """Return the dispatch kind of a keypad label, or None for unknown labels."""
    if key == CLEAR:
        return KeyKind.clear
    if key == EQUALS:
        return KeyKind.equals
    if key in OPERATORS:
        return KeyKind.operator
    if (len(key) == 1 and key in "0123456789") or key in (DECIMAL_POINT, PERCENT, NEGATE):
        return KeyKind.numeric
    return None
