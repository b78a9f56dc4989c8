"""Cell value objects and pure grid transformations.

A grid is a tuple of exactly 81 :class:`Cell` instances in row-major order.
None of the helpers mutate their input; each returns a fresh tuple that shares
untouched cells with the original.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, Sequence, Tuple

__all__ = [
    "ALL_DIGITS",
    "Cell",
    "Grid",
    "auto_fill_notes",
    "build_grid",
    "candidates",
    "count_digits",
    "enter_digit",
    "is_solved",
    "peers_of",
    "toggle_note",
    "validate_grid",
]

ALL_DIGITS: FrozenSet[int] = frozenset(range(1, 10))


@dataclass(frozen=True, slots=True)
class Cell:
    """One board position."""

    row: int
    col: int
    value: int = 0
    solution_value: int = 0
    notes: FrozenSet[int] = field(default_factory=frozenset)
    is_fixed: bool = False
    is_error: bool = False

    @property
    def box_index(self) -> int:
        return (self.row // 3) * 3 + self.col // 3

    @property
    def index(self) -> int:
        return self.row * 9 + self.col


Grid = Tuple[Cell, ...]


@lru_cache(maxsize=81)
def peers_of(index: int) -> Tuple[int, ...]:
    """Indices sharing a row, column or box with ``index``, itself excluded."""

    r, c = divmod(index, 9)
    br, bc = r - r % 3, c - c % 3
    peers = set()
    for i in range(9):
        peers.add(r * 9 + i)
        peers.add(i * 9 + c)
    for i in range(3):
        for j in range(3):
            peers.add((br + i) * 9 + bc + j)
    peers.discard(index)
    return tuple(sorted(peers))


def build_grid(puzzle: Sequence[int], solution: Sequence[int]) -> Grid:
    """Create the starting grid; every clue becomes a fixed cell."""

    if len(puzzle) != 81 or len(solution) != 81:
        raise ValueError("puzzle and solution must both hold 81 cells")
    return tuple(
        Cell(
            row=i // 9,
            col=i % 9,
            value=puzzle[i],
            solution_value=solution[i],
            is_fixed=puzzle[i] != 0,
        )
        for i in range(81)
    )


def validate_grid(grid: Grid) -> Grid:
    """Recompute ``is_error`` as pure peer-duplicate detection."""

    out = []
    for cell in grid:
        if cell.value == 0:
            flag = False
        else:
            flag = any(grid[p].value == cell.value for p in peers_of(cell.index))
        out.append(cell if cell.is_error == flag else replace(cell, is_error=flag))
    return tuple(out)


def count_digits(grid: Iterable[Cell]) -> Dict[int, int]:
    counts = {d: 0 for d in range(1, 10)}
    for cell in grid:
        if cell.value:
            counts[cell.value] += 1
    return counts


def is_solved(grid: Grid) -> bool:
    return len(grid) == 81 and all(c.value != 0 and c.value == c.solution_value for c in grid)


def candidates(grid: Grid, index: int) -> FrozenSet[int]:
    """Digits not yet present among the peers of ``index``."""

    used = {grid[p].value for p in peers_of(index)}
    return ALL_DIGITS - used


def auto_fill_notes(grid: Grid) -> Grid:
    # Replaces notes wholesale; filled cells are left as they are.
    return tuple(
        replace(cell, notes=candidates(grid, cell.index)) if cell.value == 0 else cell
        for cell in grid
    )


def toggle_note(grid: Grid, index: int, digit: int) -> Grid:
    cell = grid[index]
    notes = cell.notes - {digit} if digit in cell.notes else cell.notes | {digit}
    return grid[:index] + (replace(cell, notes=frozenset(notes)),) + grid[index + 1 :]


def enter_digit(grid: Grid, index: int, digit: int) -> Grid:
    """Place ``digit`` (or clear it when already present) and revalidate.

    A correct placement also strikes ``digit`` from the notes of every peer.
    """
    cell = grid[index]
    value = 0 if cell.value == digit else digit
    cells = list(grid)
    cells[index] = replace(cell, value=value, notes=frozenset())

    if value != 0 and value == cell.solution_value:
        for p in peers_of(index):
            peer = cells[p]
            if value in peer.notes:
                cells[p] = replace(peer, notes=peer.notes - {value})

    return validate_grid(tuple(cells))
