from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Request, Response

from calcpad.api.routes.calculator import get_calculator_service
from calcpad.core.context import set_session_id
from calcpad.engine.expression import reset
from calcpad.models.calculator import SessionKeysRequest, SessionResponse
from calcpad.services.calculator import CalculatorService
from calcpad.services.sessions import SessionStore, session_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_session_store() -> SessionStore:
    return session_store


async def bind_session_id(
    request: Request,
    session_id: str = Path(..., min_length=1, max_length=128),
) -> str:
    # the context var covers this task; request.state reaches the middleware
    set_session_id(session_id)
    request.state.session_id = session_id
    return session_id


@router.get("/{session_id}", response_model=SessionResponse)
async def get_calculator_session(
    session_id: str = Depends(bind_session_id),
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    return SessionResponse(sessionId=session_id, state=store.get(session_id) or reset())


@router.post("/{session_id}/keys", response_model=SessionResponse)
async def press_session_keys(
    request: SessionKeysRequest,
    session_id: str = Depends(bind_session_id),
    store: SessionStore = Depends(get_session_store),
    service: CalculatorService = Depends(get_calculator_service),
) -> SessionResponse:
    state = store.apply(session_id, service.press, request.keys)
    return SessionResponse(sessionId=session_id, state=state)


@router.delete("/{session_id}", status_code=204)
async def reset_calculator_session(
    session_id: str = Depends(bind_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    store.clear(session_id)
    return Response(status_code=204)
