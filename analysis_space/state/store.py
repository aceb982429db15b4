"""
Analysis Store

Single dispatch point for analysis state.

GUARANTEES:
===========
1. Only dispatch() replaces the state
2. Listeners run once per action, in subscription order, with the state
   produced by that action
3. Actions dispatched from inside a listener are queued and applied after
   the current notification round
4. A failing listener is logged and never stops the others
5. When reducing a queued action raises, the error propagates to the
   outermost dispatch and the actions still queued are logged and dropped
"""

from __future__ import annotations
from collections import deque
from typing import Callable, Deque, Dict, Optional
import itertools
import logging

from ..config import ViewportSettings
from .actions import Action, ActionType
from .reducer import AnalysisSpaceState, initial_state, reduce

LOGGER = logging.getLogger(__name__)

Listener = Callable[[AnalysisSpaceState, Action], None]
Unsubscribe = Callable[[], None]


class AnalysisStore:
    """Holds the current AnalysisSpaceState and notifies subscribers."""

    def __init__(
        self,
        settings: Optional[ViewportSettings] = None,
        state: Optional[AnalysisSpaceState] = None,
    ):
        self._settings = settings or ViewportSettings()
        self._state = state if state is not None else initial_state(self._settings)
        self._listeners: Dict[int, Listener] = {}
        self._ids = itertools.count()
        self._queue: Deque[Action] = deque()
        self._dispatching = False

    @property
    def state(self) -> AnalysisSpaceState:
        return self._state

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, action: Action) -> AnalysisSpaceState:
        """
        Apply `action` and notify listeners.

        Unknown actions raise ValueError before anything is queued. When
        called re-entrantly the action is queued and the current state is
        returned unchanged.
        """
        if not isinstance(getattr(action, 'type', None), ActionType):
            raise ValueError(f"Unknown action: {action!r}")
        self._queue.append(action)
        if self._dispatching:
            return self._state

        self._dispatching = True
        try:
            while self._queue:
                next_action = self._queue.popleft()
                try:
                    self._state = reduce(self._state, next_action, self._settings)
                except Exception:
                    if self._queue:
                        LOGGER.error(
                            "%s failed; dropping %d queued action(s): %s",
                            next_action.type.name, len(self._queue),
                            ", ".join(a.type.name for a in self._queue)
                        )
                    raise
                self._notify(next_action)
        finally:
            self._queue.clear()
            self._dispatching = False
        return self._state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener; the returned callable removes it (idempotent)."""
        key = next(self._ids)
        self._listeners[key] = listener

        def unsubscribe() -> None:
            self._listeners.pop(key, None)

        return unsubscribe

    def _notify(self, action: Action) -> None:
        for key, listener in list(self._listeners.items()):
            if key not in self._listeners:
                continue
            try:
                listener(self._state, action)
            except Exception:
                LOGGER.exception(
                    "Listener %r failed while handling %s", listener, action.type.name
                )
