from fastapi import APIRouter, Depends, Query

from calcpad.engine.keypad import KEYPAD
from calcpad.models.calculator import (
    CalculatorResult,
    CalculatorState,
    EvaluateRequest,
    EvaluationResult,
    KeyPressRequest,
    KeypadLayout,
)
from calcpad.services.calculator import CalculatorService

router = APIRouter(tags=["calculator"])


def get_calculator_service() -> CalculatorService:
    return CalculatorService()


@router.get("/calc", response_model=CalculatorResult)
async def evaluate_calculator_expression(
    query: str = Query(..., description="Display expression to evaluate, e.g. 12+(-3)×4."),
    service: CalculatorService = Depends(get_calculator_service),
) -> CalculatorResult:
    return service.evaluate(query)


@router.get("/calc/keypad", response_model=KeypadLayout)
async def get_keypad_layout() -> KeypadLayout:
    return KEYPAD


@router.post("/calc/press", response_model=CalculatorState)
async def press_calculator_key(
    request: KeyPressRequest,
    service: CalculatorService = Depends(get_calculator_service),
) -> CalculatorState:
    return service.press(request.state, request.key)


@router.post("/calc/evaluate", response_model=EvaluationResult)
async def evaluate_calculator_state(
    request: EvaluateRequest,
    service: CalculatorService = Depends(get_calculator_service),
) -> EvaluationResult:
    return service.evaluate_state(CalculatorState(expression=request.expression, lastKind=request.lastKind))
