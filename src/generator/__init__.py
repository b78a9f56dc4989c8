"""Puzzle generator: solved grid by backtracking, symmetric carving."""

from __future__ import annotations

from .backtracking import CARVE_RANGE, DEFAULT_REMOVAL_ATTEMPTS, Puzzle, PuzzleGenerator, generate
from .grid_text import format_grid, from_string, is_valid_solution, to_string

__all__ = [
    "CARVE_RANGE",
    "DEFAULT_REMOVAL_ATTEMPTS",
    "Puzzle",
    "PuzzleGenerator",
    "format_grid",
    "from_string",
    "generate",
    "is_valid_solution",
    "to_string",
]
