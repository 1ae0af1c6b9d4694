from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LastInputKind(str, Enum):
    number = "number"
    operator = "operator"
    none = "none"


class EvaluationOk(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["ok"] = "ok"
    value: str = Field(..., description="Formatted numeric result.")


class EvaluationFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    reason: str = Field(..., description="Why the expression could not be evaluated.")


EvaluationResult = Annotated[Union[EvaluationOk, EvaluationFailure], Field(discriminator="status")]


class CalculatorState(BaseModel):
    """
    Everything a keypad front end has to carry between key presses.

    Instances are immutable; every transition returns a new state.
    """

    model_config = ConfigDict(frozen=True)

    expression: str = Field(default="0", description="Expression currently shown to the user.")
    lastKind: LastInputKind = Field(
        default=LastInputKind.none, description="Kind of the most recent accepted input."
    )
    displayedExpression: str = Field(
        default="", description="Expression shown above the result after evaluation."
    )


class CalculatorResult(BaseModel):
    expression: str = Field(..., description="The display expression that was evaluated.")
    result: str = Field(..., description="The formatted result.")


class KeyPressRequest(BaseModel):
    state: CalculatorState = Field(default_factory=CalculatorState)
    key: str = Field(..., min_length=1, description="Keypad label that was pressed.")


class EvaluateRequest(BaseModel):
    expression: str = Field(..., description="Display expression to evaluate.")
    lastKind: LastInputKind = Field(default=LastInputKind.none)


class SessionKeysRequest(BaseModel):
    keys: List[str] = Field(default_factory=list, description="Keypad labels, applied in order.")

    @model_validator(mode="after")
    def validate_keys(self) -> "SessionKeysRequest":
        if not self.keys:
            raise ValueError("At least one key is required.")
        return self


class SessionResponse(BaseModel):
    sessionId: str = Field(..., description="Calculator session identifier.")
    state: CalculatorState


class KeypadLayout(BaseModel):
    function: List[str]
    number: List[List[str]]
    operator: List[str]
