from __future__ import annotations

import random

import pytest

from generator import (
    CARVE_RANGE,
    Puzzle,
    PuzzleGenerator,
    format_grid,
    from_string,
    generate,
    is_valid_solution,
    to_string,
)
from generator.backtracking import fill_diagonal, fill_remaining, remove_digits_symmetrically
from session import Difficulty

SEEDS = [0, 1, 7, 42, 2024]


@pytest.mark.parametrize("seed", SEEDS)
def test_solution_is_a_valid_sudoku(seed: int) -> None:
    puzzle = generate(42, seed=seed)
    assert len(puzzle.solution) == 81
    assert is_valid_solution(puzzle.solution)


@pytest.mark.parametrize("seed", SEEDS)
def test_clues_agree_with_solution(seed: int) -> None:
    puzzle = generate(54, seed=seed)
    for clue, answer in zip(puzzle.puzzle, puzzle.solution):
        assert clue == 0 or clue == answer


@pytest.mark.parametrize("seed", SEEDS)
def test_easy_tier_blanks_exactly_thirty(seed: int) -> None:
    puzzle = generate(Difficulty.EASY.empty_cells, seed=seed)
    assert puzzle.blank_count == 30


@pytest.mark.parametrize("requested", [0, 1, 30, 54, 80])
def test_blank_count_never_exceeds_request(requested: int) -> None:
    puzzle = generate(requested, seed=requested)
    assert puzzle.blank_count <= requested


@pytest.mark.parametrize("seed", SEEDS)
def test_lower_half_blanks_mirror_upper_half(seed: int) -> None:
    puzzle = generate(54, seed=seed).puzzle
    for i in range(CARVE_RANGE, 81):
        if puzzle[i] == 0:
            assert puzzle[80 - i] == 0
    unpaired = [i for i in range(40) if puzzle[i] == 0 and puzzle[80 - i] != 0]
    # Only the very last removal may lose its partner to the exhausted counter.
    assert len(unpaired) <= 1


def test_attempt_budget_limits_removals() -> None:
    puzzle = generate(80, seed=3, attempts=1)
    assert puzzle.blank_count in (1, 2)


def test_zero_attempts_leaves_grid_full() -> None:
    puzzle = generate(30, seed=3, attempts=0)
    assert puzzle.blank_count == 0
    assert puzzle.puzzle == puzzle.solution


def test_same_seed_is_deterministic() -> None:
    assert generate(42, seed=99) == generate(42, seed=99)
    assert PuzzleGenerator(seed=5).generate(30) == PuzzleGenerator(seed=5).generate(30)


def test_injected_rng_is_used() -> None:
    a = generate(42, rng=random.Random(11))
    b = generate(42, rng=random.Random(11))
    assert a == b


def test_diagonal_boxes_hold_permutations() -> None:
    grid = [[0] * 9 for _ in range(9)]
    fill_diagonal(grid, random.Random(8))
    for start in (0, 3, 6):
        box = {grid[start + i][start + j] for i in range(3) for j in range(3)}
        assert box == set(range(1, 10))
    assert grid[0][3] == 0 and grid[4][0] == 0


def test_fill_remaining_keeps_diagonal_and_completes() -> None:
    grid = [[0] * 9 for _ in range(9)]
    fill_diagonal(grid, random.Random(8))
    diagonal = [row[:] for row in grid]
    assert fill_remaining(grid)
    for r in range(9):
        for c in range(9):
            if r // 3 == c // 3:
                assert grid[r][c] == diagonal[r][c]
    assert is_valid_solution([v for row in grid for v in row])


def test_center_cell_counts_once() -> None:
    grid = [[1] * 9 for _ in range(9)]

    class CentreOnly(random.Random):
        def randrange(self, *args, **kwargs):  # type: ignore[override]
            return 40

    removed = remove_digits_symmetrically(grid, 5, CentreOnly(), attempts=10)
    assert removed == 1
    assert grid[4][4] == 0


def test_text_helpers() -> None:
    puzzle = generate(30, seed=4)
    assert from_string(to_string(puzzle.puzzle)) == list(puzzle.puzzle)
    rendered = format_grid(puzzle.puzzle)
    assert rendered.count("\n") == 12
    assert rendered.count(".") == 30
    assert from_string(". " * 81) == [0] * 81
    with pytest.raises(ValueError):
        from_string("123")


def test_payload_uses_digit_strings() -> None:
    puzzle = Puzzle(puzzle=(0,) * 81, solution=tuple(range(1, 10)) * 9)
    payload = puzzle.to_payload()
    assert payload["puzzle"] == "0" * 81
    assert payload["solution"].startswith("123456789")
    assert not is_valid_solution(puzzle.solution)
