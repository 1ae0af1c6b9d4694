from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Optional

_request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_session_id_ctx_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


def set_request_id(request_id: Optional[str] = None) -> Token:
    value = request_id or str(uuid.uuid4())
    return _request_id_ctx_var.set(value)


def get_request_id() -> Optional[str]:
    return _request_id_ctx_var.get()


def reset_request_id(token: Token) -> None:
    _request_id_ctx_var.reset(token)


def set_session_id(session_id: str) -> Token:
    return _session_id_ctx_var.set(session_id)


def get_session_id() -> Optional[str]:
    return _session_id_ctx_var.get()


def reset_session_id(token: Token) -> None:
    _session_id_ctx_var.reset(token)
