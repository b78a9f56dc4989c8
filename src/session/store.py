"""Single-writer container for the current :class:`GameState` snapshot."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, List, Tuple

from .state import GameState

__all__ = ["StateStore", "Subscriber"]

_LOGGER = logging.getLogger(__name__)

Subscriber = Callable[[GameState], None]


class StateStore:
    """Atomically swapped snapshot with publish/subscribe.

    Every writer, user actions and timer ticks alike, goes through
    :meth:`update`, which reads, transforms and swaps under one lock.  Each
    committed snapshot is queued under that same lock and delivered by a
    single draining caller outside it, so subscribers observe snapshots in
    commit order even when a subscriber writes back into the store.  A write
    made while a delivery is in progress is queued and handed out by the
    caller that is already draining.
    """

    def __init__(self, initial: GameState | None = None) -> None:
        self._lock = threading.Lock()
        self._state = initial if initial is not None else GameState.empty()
        self._subscribers: List[Subscriber] = []
        self._pending: Deque[GameState] = deque()
        self._draining = False

    @property
    def snapshot(self) -> GameState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""

        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def update(self, transform: Callable[[GameState], GameState]) -> Tuple[GameState, GameState]:
        """Apply ``transform`` to the current snapshot and publish the result.

        Returns ``(previous, current)``.  A transform that hands back the same
        object is treated as a no-op and publishes nothing.
        """
        with self._lock:
            previous = self._state
            current = transform(previous)
            if current is previous:
                return previous, current
            self._state = current
            self._pending.append(current)
        self._drain()
        return previous, current

    def _drain(self) -> None:
        while True:
            with self._lock:
                if self._draining or not self._pending:
                    return
                self._draining = True
                snapshot = self._pending.popleft()
                subscribers = list(self._subscribers)
            try:
                for callback in subscribers:
                    try:
                        callback(snapshot)
                    except Exception:  # subscriber bugs must not break the writer
                        _LOGGER.exception("state subscriber %r failed", callback)
            finally:
                with self._lock:
                    self._draining = False
