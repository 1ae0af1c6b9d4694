from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, List, Sequence

from calcpad.core.exceptions import AppError
from calcpad.engine.expression import NEGATE
from calcpad.models.calculator import CalculatorState
from calcpad.services.calculator import CalculatorService, describe_evaluable
from calcpad.services.calculator_http import CalculatorHttpService

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
logger = logging.getLogger("keypad")

KEY_ALIASES = {
    "*": "×",
    "x": "×",
    "/": "÷",
    "c": "C",
}


def parse_keys(text: str) -> List[str]:
    """Split typed input such as ``12+/-×3=`` into keypad labels."""
    keys: list[str] = []
    index = 0
    while index < len(text):
        if text.startswith(NEGATE, index):
            keys.append(NEGATE)
            index += len(NEGATE)
            continue
        char = text[index]
        index += 1
        if char.isspace():
            continue
        keys.append(KEY_ALIASES.get(char, char))
    return keys


def render_state(state: CalculatorState) -> str:
    lines = []
    if state.displayedExpression:
        lines.append(state.displayedExpression)
    lines.append(state.expression)
    return "\n".join(lines)


def run(
    keys: Iterable[str],
    *,
    base_url: str | None = None,
    timeout: float = 5.0,
) -> CalculatorState:
    if base_url:
        service = CalculatorHttpService(base_url=base_url.rstrip("/"), timeout=timeout)
    else:
        service = CalculatorService()
    return service.press_many(CalculatorState(), keys)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay calculator key presses and print the display.",
        epilog=(
            "The text '+/-' is always read as the sign-toggle key, so '5+/-' negates 5. "
            "To press '+' and then divide, separate them with a space: '5+ /'."
        ),
    )
    parser.add_argument(
        "keys",
        nargs="*",
        help="Key sequence, e.g. '12+/-×3=' ('+/-' toggles the sign). Read from stdin when omitted.",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Send key presses to a running calcpad API instead of the local engine.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="HTTP timeout in seconds when --base-url is set.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final state as JSON.",
    )
    parser.add_argument(
        "--show-evaluable",
        action="store_true",
        help="Also print the arithmetic form the expression evaluates as.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    text = " ".join(args.keys) if args.keys else sys.stdin.read()

    try:
        state = run(parse_keys(text), base_url=args.base_url, timeout=args.timeout)
    except AppError as exc:
        logger.error("%s: %s", exc.error_type, exc.message)
        return 1

    if args.json:
        print(json.dumps(state.model_dump(mode="json"), ensure_ascii=False))
    else:
        print(render_state(state))

    if args.show_evaluable:
        try:
            print(describe_evaluable(state.expression, state.lastKind))
        except AppError as exc:
            logger.error("%s: %s", exc.error_type, exc.message)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
