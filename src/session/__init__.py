"""Game session package: immutable state, single-writer store, game clock."""

from __future__ import annotations

from .cells import Cell, Grid
from .game import GameSession, PuzzleSource
from .state import Difficulty, GameState, Selection
from .store import StateStore
from .ticker import ThreadTicker, Ticker

__all__ = [
    "Cell",
    "Difficulty",
    "GameSession",
    "GameState",
    "Grid",
    "PuzzleSource",
    "Selection",
    "StateStore",
    "ThreadTicker",
    "Ticker",
]
