from __future__ import annotations

from typing import Callable, List, Optional

import pytest

import project_config
from generator import Puzzle, from_string
from session import GameSession, events

# Widely published solved grid; row 0 reads 5 3 4 6 7 8 9 1 2.
SOLVED = from_string(
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


class ManualTicker:
    """Ticker driven explicitly by the test."""

    def __init__(self) -> None:
        self.callback: Optional[Callable[[], None]] = None
        self.started = False
        self.stopped = False

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.started and not self.stopped and self.callback is not None:
                self.callback()


class FixedPuzzleSource:
    """Puzzle source returning a prepared puzzle and recording requests."""

    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self.requests: List[int] = []

    def generate(self, empty_cells: int) -> Puzzle:
        self.requests.append(empty_cells)
        return self.puzzle


def make_puzzle(clues: List[int]) -> Puzzle:
    """Puzzle over ``SOLVED`` keeping only the given indices as clues."""

    keep = set(clues)
    return Puzzle(
        puzzle=tuple(v if i in keep else 0 for i, v in enumerate(SOLVED)),
        solution=tuple(SOLVED),
    )


@pytest.fixture(autouse=True)
def _isolated_settings():
    project_config.reload()
    events.reset()
    yield
    project_config.reload()
    events.reset()


@pytest.fixture
def tickers() -> List[ManualTicker]:
    return []


@pytest.fixture
def ticker_factory(tickers: List[ManualTicker]) -> Callable[[], ManualTicker]:
    def factory() -> ManualTicker:
        ticker = ManualTicker()
        tickers.append(ticker)
        return ticker

    return factory


@pytest.fixture
def session_for(ticker_factory):
    """Build a started session over a prepared puzzle."""

    created: List[GameSession] = []

    def build(puzzle: Puzzle, difficulty: str = "EASY") -> GameSession:
        session = GameSession(generator=FixedPuzzleSource(puzzle), ticker_factory=ticker_factory)
        session.start_new_game(difficulty)
        created.append(session)
        return session

    yield build
    for session in created:
        session.close()
