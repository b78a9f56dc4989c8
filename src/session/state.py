"""Immutable game state snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from contracts.errors import SessionInputError
from project_config import get_section

from .cells import Grid, count_digits

__all__ = ["Difficulty", "GameState", "Selection"]


_DEFAULT_BLANKS = {"easy": 30, "medium": 42, "hard": 54}


class Difficulty(str, Enum):
    """Named tiers, each mapping to a number of blanks to carve."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @property
    def empty_cells(self) -> int:
        key = self.value.lower()
        return int(get_section(f"difficulty.{key}", _DEFAULT_BLANKS[key]))

    @classmethod
    def from_value(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            raise SessionInputError(f"Unsupported difficulty: {value!r}") from exc


@dataclass(frozen=True)
class Selection:
    """The selected cell; absence of a selection is ``None``, never a sentinel."""

    row: int
    col: int

    @property
    def index(self) -> int:
        return self.row * 9 + self.col


def _frozen_counts(counts: Mapping[int, int]) -> Mapping[int, int]:
    return MappingProxyType(dict(counts))


@dataclass(frozen=True)
class GameState:
    """Single source of truth for one game.

    Instances are never modified; :meth:`evolve` derives the next snapshot.
    ``history`` holds full prior grids, newest last.  ``game_id`` increases with
    every new game so late timer ticks can be told apart from current ones.
    """

    grid: Grid = ()
    selection: Optional[Selection] = None
    selected_number: Optional[int] = None
    is_note_mode_enabled: bool = False
    number_counts: Mapping[int, int] = field(default_factory=lambda: _frozen_counts({}))
    history: Tuple[Grid, ...] = ()
    is_game_won: bool = False
    difficulty: Difficulty = Difficulty.MEDIUM
    timer_seconds: int = 0
    game_id: int = 0

    @classmethod
    def empty(cls) -> "GameState":
        return cls()

    @classmethod
    def fresh(cls, grid: Grid, difficulty: Difficulty, game_id: int) -> "GameState":
        return cls(
            grid=grid,
            number_counts=_frozen_counts(count_digits(grid)),
            difficulty=difficulty,
            game_id=game_id,
        )

    def evolve(self, **changes: Any) -> "GameState":
        if "number_counts" in changes:
            changes["number_counts"] = _frozen_counts(changes["number_counts"])
        if "history" in changes:
            changes["history"] = tuple(changes["history"])
        return replace(self, **changes)

    # ---------- Derived views ----------

    @property
    def selected_row(self) -> Optional[int]:
        return None if self.selection is None else self.selection.row

    @property
    def selected_col(self) -> Optional[int]:
        return None if self.selection is None else self.selection.col

    @property
    def can_undo(self) -> bool:
        return bool(self.history) and not self.is_game_won

    @property
    def highlight_value(self) -> int:
        """Digit to emphasise: the pen digit, else the selected cell's value."""

        if self.selected_number is not None:
            return self.selected_number
        if self.selection is not None and self.grid:
            return self.grid[self.selection.index].value
        return 0

    def is_digit_exhausted(self, digit: int) -> bool:
        return self.number_counts.get(digit, 0) >= 9

    @property
    def formatted_time(self) -> str:
        hours, rest = divmod(self.timer_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        if hours:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes:02d}:{seconds:02d}"

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready view for the presentation layer; solution values stay hidden."""

        selection = None
        if self.selection is not None:
            selection = {"row": self.selection.row, "col": self.selection.col}
        return {
            "game_id": self.game_id,
            "difficulty": self.difficulty.value,
            "grid": [
                {
                    "row": cell.row,
                    "col": cell.col,
                    "value": cell.value,
                    "notes": sorted(cell.notes),
                    "fixed": cell.is_fixed,
                    "error": cell.is_error,
                }
                for cell in self.grid
            ],
            "selection": selection,
            "selected_number": self.selected_number,
            "note_mode": self.is_note_mode_enabled,
            "number_counts": {str(d): self.number_counts.get(d, 0) for d in range(1, 10)},
            "history_depth": len(self.history),
            "can_undo": self.can_undo,
            "is_game_won": self.is_game_won,
            "timer_seconds": self.timer_seconds,
        }
