"""Game session state machine.

The session owns one :class:`~session.store.StateStore`.  Every public
operation is expressed as a pure ``GameState -> GameState`` transform and
committed through the store, so user actions and timer ticks share a single
serialization point.  Once a game is won every operation except
:meth:`GameSession.start_new_game` is a no-op.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol, Tuple

from contracts.errors import check_coordinate, check_digit
from generator import Puzzle, PuzzleGenerator
from project_config import get_section

from . import events
from .cells import auto_fill_notes, build_grid, count_digits, enter_digit, is_solved, toggle_note, validate_grid
from .state import Difficulty, GameState, Selection
from .store import StateStore, Subscriber
from .ticker import ThreadTicker, Ticker, TickerFactory

__all__ = ["GameSession", "PuzzleSource"]

_LOGGER = logging.getLogger(__name__)


class PuzzleSource(Protocol):
    """Anything able to produce a puzzle with a requested number of blanks."""

    def generate(self, empty_cells: int) -> Puzzle:
        """Return a puzzle/solution pair."""


def _default_ticker() -> Ticker:
    return ThreadTicker(float(get_section("session.timer_interval", 1.0)))


# ---------- Transforms ----------

def _apply_input(state: GameState, row: int, col: int, digit: int) -> GameState:
    index = row * 9 + col
    if state.grid[index].is_fixed:
        return state

    history = state.history + (state.grid,)
    if state.is_note_mode_enabled:
        # Pure note edits skip validation; counts and win status cannot change.
        return state.evolve(grid=toggle_note(state.grid, index, digit), history=history)

    grid = enter_digit(state.grid, index, digit)
    return state.evolve(
        grid=grid,
        history=history,
        number_counts=count_digits(grid),
        is_game_won=is_solved(grid),
    )


def _select(row: int, col: int) -> Callable[[GameState], GameState]:
    def transform(state: GameState) -> GameState:
        if state.selected_number is not None:
            return _apply_input(state, row, col, state.selected_number)
        return state.evolve(selection=Selection(row, col), selected_number=None)

    return transform


def _input(digit: int) -> Callable[[GameState], GameState]:
    def transform(state: GameState) -> GameState:
        selection = state.selection
        if selection is not None:
            applied = _apply_input(state, selection.row, selection.col, digit)
            return applied.evolve(selection=None, selected_number=None)
        pen = None if state.selected_number == digit else digit
        return state.evolve(selected_number=pen)

    return transform


def _toggle_note_mode(state: GameState) -> GameState:
    return state.evolve(is_note_mode_enabled=not state.is_note_mode_enabled, selected_number=None)


def _undo(state: GameState) -> GameState:
    if not state.history:
        return state
    grid = state.history[-1]
    return state.evolve(
        grid=grid,
        history=state.history[:-1],
        number_counts=count_digits(grid),
        is_game_won=is_solved(grid),
    )


def _auto_fill(state: GameState) -> GameState:
    return state.evolve(grid=auto_fill_notes(state.grid), history=state.history + (state.grid,))


class GameSession:
    """Owns the state of one in-progress game and its clock."""

    def __init__(
        self,
        *,
        generator: Optional[PuzzleSource] = None,
        ticker_factory: Optional[TickerFactory] = None,
        difficulty: Difficulty | str | None = None,
    ) -> None:
        self._generator: PuzzleSource = generator if generator is not None else PuzzleGenerator()
        self._ticker_factory: TickerFactory = ticker_factory or _default_ticker
        self._store = StateStore()
        self._ticker: Optional[Tuple[int, Ticker]] = None
        self._ticker_lock = threading.Lock()
        if difficulty is not None:
            self.start_new_game(difficulty)

    # ---------- Observation ----------

    @property
    def state(self) -> GameState:
        return self._store.snapshot

    @property
    def can_undo(self) -> bool:
        return self._store.snapshot.can_undo

    @property
    def timer_running(self) -> bool:
        return self._ticker is not None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._store.subscribe(callback)

    # ---------- Lifecycle ----------

    def start_new_game(self, difficulty: Difficulty | str) -> GameState:
        """Replace the current game with a freshly generated one."""

        level = Difficulty.from_value(difficulty)
        self._stop_timer()

        puzzle = self._generator.generate(level.empty_cells)
        grid = validate_grid(build_grid(puzzle.puzzle, puzzle.solution))

        def begin(state: GameState) -> GameState:
            fresh = GameState.fresh(grid, level, state.game_id + 1)
            return fresh.evolve(is_game_won=is_solved(grid))

        _, current = self._store.update(begin)
        _LOGGER.info(
            "game %d started: %s with %d blanks", current.game_id, level.value, puzzle.blank_count
        )
        events.append_event(
            {
                "event": "new_game",
                "game_id": current.game_id,
                "difficulty": level.value,
                "blanks": puzzle.blank_count,
            }
        )
        if not current.is_game_won:
            self._start_timer(current.game_id)
        return current

    def close(self) -> None:
        """Stop the clock; the last snapshot stays readable."""

        self._stop_timer()

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---------- Player operations ----------

    def select_cell(self, row: int, col: int) -> GameState:
        check_coordinate("row", row)
        check_coordinate("col", col)
        return self._commit(_select(row, col))

    def handle_input(self, digit: int) -> GameState:
        check_digit(digit)
        return self._commit(_input(digit))

    def toggle_note_mode(self) -> GameState:
        return self._commit(_toggle_note_mode)

    def undo(self) -> GameState:
        previous = self._store.snapshot
        current = self._commit(_undo)
        if current is not previous:
            events.append_event(
                {"event": "undo", "game_id": current.game_id, "history_depth": len(current.history)}
            )
        return current

    def auto_fill_notes(self) -> GameState:
        return self._commit(_auto_fill)

    # ---------- Internals ----------

    def _commit(self, transform: Callable[[GameState], GameState]) -> GameState:
        def guarded(state: GameState) -> GameState:
            if state.is_game_won or not state.grid:
                return state
            return transform(state)

        previous, current = self._store.update(guarded)
        if current.is_game_won and not previous.is_game_won:
            self._stop_timer(current.game_id)
            _LOGGER.info("game %d won after %s", current.game_id, current.formatted_time)
            events.append_event(
                {
                    "event": "game_won",
                    "game_id": current.game_id,
                    "difficulty": current.difficulty.value,
                    "timer_seconds": current.timer_seconds,
                }
            )
        return current

    def _tick(self, game_id: int) -> None:
        def advance(state: GameState) -> GameState:
            if state.game_id != game_id or state.is_game_won:
                return state
            return state.evolve(timer_seconds=state.timer_seconds + 1)

        self._store.update(advance)

    def _start_timer(self, game_id: int) -> None:
        """Start the clock for ``game_id`` and stop whichever one it replaces.

        A game that has already been superseded gets no clock.
        """
        with self._ticker_lock:
            if self._store.snapshot.game_id != game_id:
                return
            replaced = self._ticker
            ticker = self._ticker_factory()
            self._ticker = (game_id, ticker)
            ticker.start(lambda: self._tick(game_id))
        if replaced is not None:
            replaced[1].stop()

    def _stop_timer(self, game_id: Optional[int] = None) -> None:
        """Stop the running clock; with ``game_id``, only if it belongs to that game."""

        with self._ticker_lock:
            current = self._ticker
            if current is None or (game_id is not None and current[0] != game_id):
                return
            self._ticker = None
        current[1].stop()
