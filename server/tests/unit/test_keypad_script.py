from __future__ import annotations

import io
import json

import pytest

from calcpad.models.calculator import CalculatorState
from scripts import keypad as script


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("12+3=", ["1", "2", "+", "3", "="]),
        ("4+/-3", ["4", "+/-", "3"]),
        ("6 * 7 / 2", ["6", "×", "7", "÷", "2"]),
        ("5%c", ["5", "%", "C"]),
    ],
)
def test_parse_keys(text: str, expected: list[str]) -> None:
    assert script.parse_keys(text) == expected


def test_render_state_shows_prior_expression_above_result() -> None:
    state = CalculatorState(expression="4", displayedExpression="2+2")

    assert script.render_state(state) == "2+2\n4"
    assert script.render_state(CalculatorState()) == "0"


def test_main_prints_display(capsys) -> None:
    exit_code = script.main(["10÷4="])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == ["10÷4", "2.5"]


def test_main_reads_stdin_and_prints_json(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("50%+2"))

    exit_code = script.main(["--json", "--show-evaluable"])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert json.loads(lines[0]) == {"expression": "50%+2", "lastKind": "number", "displayedExpression": ""}
    assert lines[1] == "0.5+2"


def test_main_reports_invalid_keys(capsys) -> None:
    exit_code = script.main(["2^3"])

    assert exit_code == 1
    assert capsys.readouterr().out == ""


def test_run_uses_http_service_when_base_url_given(monkeypatch) -> None:
    calls: list[tuple[str, float]] = []

    class FakeHttpService:
        def __init__(self, base_url: str, timeout: float) -> None:
            calls.append((base_url, timeout))

        def press_many(self, state, keys):
            return CalculatorState(expression="".join(keys))

    monkeypatch.setattr(script, "CalculatorHttpService", FakeHttpService)

    state = script.run(["1", "+"], base_url="http://calculator.local/", timeout=2.0)

    assert calls == [("http://calculator.local", 2.0)]
    assert state.expression == "1+"


def test_sign_toggle_text_always_wins_over_plus_then_divide() -> None:
    assert script.parse_keys("5+/-") == ["5", "+/-"]
    assert script.parse_keys("5+ /") == ["5", "+", "÷"]


def test_help_explains_sign_toggle_parsing() -> None:
    help_text = " ".join(script.build_parser().format_help().split())

    assert "'+/-' is always read as the sign-toggle key" in help_text
    assert "'5+ /'" in help_text
