# backtracking.py
# Build a solved grid from three random diagonal boxes plus ascending-order
# backtracking, then carve blanks in 180-degree symmetric pairs.

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from contracts.errors import GenerationError
from project_config import get_section

from .grid_text import to_string

_LOGGER = logging.getLogger(__name__)

DEFAULT_REMOVAL_ATTEMPTS = 100
# Draws are taken from the first half of the board, centre cell included.
CARVE_RANGE = 41

__all__ = [
    "CARVE_RANGE",
    "DEFAULT_REMOVAL_ATTEMPTS",
    "Puzzle",
    "PuzzleGenerator",
    "generate",
]


@dataclass(frozen=True)
class Puzzle:
    """Playable grid together with the solved grid it was carved from."""

    puzzle: Tuple[int, ...]
    solution: Tuple[int, ...]

    @property
    def blank_count(self) -> int:
        return sum(1 for v in self.puzzle if v == 0)

    def to_payload(self) -> dict:
        return {"puzzle": to_string(self.puzzle), "solution": to_string(self.solution)}


# ---------- Solved grid ----------

def _is_safe(grid: List[List[int]], r: int, c: int, num: int) -> bool:
    if num in grid[r]:
        return False
    if any(grid[i][c] == num for i in range(9)):
        return False
    br, bc = r - r % 3, c - c % 3
    for i in range(3):
        for j in range(3):
            if grid[br + i][bc + j] == num:
                return False
    return True


def _on_diagonal_box(r: int, c: int) -> bool:
    return r // 3 == c // 3


def fill_diagonal(grid: List[List[int]], rng: random.Random) -> None:
    """Fill boxes (0,0), (3,3) and (6,6) with independent permutations of 1-9."""

    for start in (0, 3, 6):
        nums = list(range(1, 10))
        rng.shuffle(nums)
        for i in range(3):
            for j in range(3):
                grid[start + i][start + j] = nums[i * 3 + j]


def fill_remaining(grid: List[List[int]]) -> bool:
    """Complete ``grid`` in place; digits are always tried in ascending order."""

    order = [(r, c) for r in range(9) for c in range(9) if not _on_diagonal_box(r, c)]

    def solve(k: int) -> bool:
        if k == len(order):
            return True
        r, c = order[k]
        for num in range(1, 10):
            if _is_safe(grid, r, c, num):
                grid[r][c] = num
                if solve(k + 1):
                    return True
                grid[r][c] = 0
        return False

    return solve(0)


# ---------- Carving ----------

def remove_digits_symmetrically(
    grid: List[List[int]],
    count: int,
    rng: random.Random,
    attempts: int = DEFAULT_REMOVAL_ATTEMPTS,
) -> int:
    """Clear up to ``count`` cells; return how many were actually cleared."""

    remaining = count
    attempt = 0
    while remaining > 0 and attempt < attempts:
        cell_id = rng.randrange(CARVE_RANGE)
        r, c = divmod(cell_id, 9)
        if grid[r][c] != 0:
            grid[r][c] = 0
            remaining -= 1
            opp_r, opp_c = 8 - r, 8 - c
            if grid[opp_r][opp_c] != 0 and remaining > 0:
                grid[opp_r][opp_c] = 0
                remaining -= 1
        attempt += 1
    return count - max(remaining, 0)


# ---------- Top-level generation ----------

def generate(
    empty_cells: int,
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    attempts: Optional[int] = None,
) -> Puzzle:
    """Generate a puzzle with up to ``empty_cells`` blanks.

    ``rng`` wins over ``seed``; with neither, a fresh entropy-seeded source is
    used.  When the draw budget runs out first the puzzle simply has fewer
    blanks than requested.
    """
    if rng is None:
        rng = random.Random(seed)
    if attempts is None:
        attempts = int(get_section("generator.removal_attempts", DEFAULT_REMOVAL_ATTEMPTS))

    grid = [[0] * 9 for _ in range(9)]
    fill_diagonal(grid, rng)
    if not fill_remaining(grid):  # pragma: no cover - every diagonal seed completes
        raise GenerationError("backtracking exhausted without a solved grid")

    solution = tuple(v for row in grid for v in row)

    removed = remove_digits_symmetrically(grid, max(empty_cells, 0), rng, attempts)
    if removed < empty_cells:
        _LOGGER.info(
            "carving stopped after %d draws with %d of %d blanks", attempts, removed, empty_cells
        )

    puzzle = tuple(v for row in grid for v in row)
    _LOGGER.debug("generated puzzle with %d blanks", removed)
    return Puzzle(puzzle=puzzle, solution=solution)


class PuzzleGenerator:
    """Generator bound to one random source."""

    def __init__(self, *, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def generate(self, empty_cells: int) -> Puzzle:
        return generate(empty_cells, rng=self.rng)
