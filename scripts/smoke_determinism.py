#!/usr/bin/env python3
"""Smoke-test deterministic behaviour of the puzzle generator."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from generator import generate, is_valid_solution
from session import Difficulty


def _run_with_seed(seed: int, blanks: int):
    puzzle = generate(blanks, seed=seed)
    if not is_valid_solution(puzzle.solution):
        raise SystemExit(f"seed {seed} produced an invalid solution")
    return puzzle


def main() -> int:
    for level in Difficulty:
        first = _run_with_seed(1234, level.empty_cells)
        second = _run_with_seed(1234, level.empty_cells)
        if first != second:
            print(f"determinism failed for {level.value}")
            return 1

        third = _run_with_seed(4321, level.empty_cells)
        if first.solution == third.solution:
            print(f"different seed produced identical solution for {level.value}")
            return 1

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
