"""Periodic tick sources for the game clock."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol

__all__ = ["ThreadTicker", "Ticker", "TickerFactory"]


class Ticker(Protocol):
    """Abstract periodic tick source."""

    def start(self, callback: Callable[[], None]) -> None:
        """Begin invoking ``callback`` once per interval."""

    def stop(self) -> None:
        """Stop ticking; no callback runs after this returns."""


TickerFactory = Callable[[], Ticker]


class ThreadTicker:
    """Ticker backed by a daemon thread waiting on an event."""

    def __init__(self, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self, callback: Callable[[], None]) -> None:
        if self._thread is not None:
            raise RuntimeError("ticker already started")

        def run() -> None:
            while not self._stopped.wait(self.interval):
                callback()

        self._thread = threading.Thread(target=run, name="sudoku-timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
