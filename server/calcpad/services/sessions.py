from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, Optional

from calcpad.engine.expression import reset
from calcpad.models.calculator import CalculatorState


class SessionStore:
    """
    In-memory calculator state keyed by sessionId.

    Lives for the lifetime of the process only. Updates for one session are
    applied under a lock so concurrent key presses are serialized.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, CalculatorState] = {}

    def get(self, session_id: str) -> Optional[CalculatorState]:
        with self._lock:
            return self._sessions.get(session_id)

    def apply(
        self,
        session_id: str,
        transition: Callable[[CalculatorState, str], CalculatorState],
        keys: Iterable[str],
    ) -> CalculatorState:
        """
        Fold keys through transition and store the final state.

        Nothing is stored when a transition raises, so a rejected key leaves the
        session as it was before the request.
        """
        with self._lock:
            state = self._sessions.get(session_id) or reset()
            for key in keys:
                state = transition(state, key)
            self._sessions[session_id] = state
            return state

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_store = SessionStore()
