from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from calcpad.core.config import get_settings
from calcpad.models.calculator import CalculatorResult, CalculatorState
from calcpad.services.calculator import CalculatorError


class CalculatorHttpServiceError(CalculatorError):
    status_code = 502
    error_type = "CALCULATOR_HTTP_ERROR"


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return default
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            return error.get("message", default)
    return default


@dataclass
class CalculatorHttpService:
    """Talks to a remote calcpad API with the same surface as CalculatorService."""

    base_url: str
    timeout: float = 5.0

    @classmethod
    def from_settings(cls) -> "CalculatorHttpService":
        settings = get_settings()
        if not settings.calc_http_base_url:
            raise CalculatorHttpServiceError("CALC_HTTP_BASE_URL is not configured.")
        return cls(
            base_url=settings.calc_http_base_url.rstrip("/"),
            timeout=float(settings.calc_http_timeout_sec),
        )

    def evaluate(self, expression: str) -> CalculatorResult:
        query = expression.strip()
        if not query:
            raise CalculatorError("Expression cannot be empty.")

        payload = self._request("GET", "/calc", params={"query": query})
        return self._parse(CalculatorResult, payload)

    def press(self, state: CalculatorState, key: str) -> CalculatorState:
        payload = self._request(
            "POST",
            "/calc/press",
            json={"state": state.model_dump(mode="json"), "key": key},
        )
        return self._parse(CalculatorState, payload)

    def press_many(self, state: CalculatorState, keys: Iterable[str]) -> CalculatorState:
        for key in keys:
            state = self.press(state, key)
        return state

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise CalculatorHttpServiceError("Calculator service is unavailable.") from exc

        if response.status_code != 200:
            raise CalculatorHttpServiceError(
                _error_message(response, "Calculator request failed."),
                details={"status": response.status_code},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise CalculatorHttpServiceError("Calculator response was not valid JSON.") from exc

    @staticmethod
    def _parse(model, payload: Any):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise CalculatorHttpServiceError("Calculator response had an unexpected shape.") from exc
