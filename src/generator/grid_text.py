"""Text helpers for 81-cell grids."""

from __future__ import annotations

from typing import List, Sequence

__all__ = ["format_grid", "from_string", "is_valid_solution", "to_string"]

_DIGITS = frozenset(range(1, 10))


def to_string(values: Sequence[int]) -> str:
    return "".join(str(v or 0) for v in values)


def from_string(s: str) -> List[int]:
    s = s.strip().replace("\n", "").replace(" ", "")
    if len(s) != 81:
        raise ValueError(f"grid string must hold 81 cells, got {len(s)}")
    return [int(ch) if ch.isdigit() else 0 for ch in s]


def format_grid(values: Sequence[int]) -> str:
    lines = []
    for r in range(9):
        if r % 3 == 0:
            lines.append("+-------+-------+-------+")
        row = []
        for c in range(9):
            v = values[r * 9 + c]
            row.append(str(v) if v != 0 else ".")
            if c % 3 == 2:
                row.append("|")
        lines.append("| " + " ".join(row))
    lines.append("+-------+-------+-------+")
    return "\n".join(lines)


def is_valid_solution(values: Sequence[int]) -> bool:
    """Return ``True`` when every row, column and box holds 1-9 exactly once."""

    if len(values) != 81:
        return False
    for i in range(9):
        row = {values[i * 9 + c] for c in range(9)}
        col = {values[r * 9 + i] for r in range(9)}
        br, bc = (i // 3) * 3, (i % 3) * 3
        box = {values[(br + r) * 9 + bc + c] for r in range(3) for c in range(3)}
        if row != _DIGITS or col != _DIGITS or box != _DIGITS:
            return False
    return True
