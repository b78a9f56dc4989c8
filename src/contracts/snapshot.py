"""JSON Schema contract for published game state snapshots."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import jsonschema

from .errors import SnapshotValidationError

__all__ = ["SCHEMA_PATH", "load_schema", "validate_snapshot"]

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "game_state.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    """Load and cache the snapshot schema."""

    try:
        return json.loads(SCHEMA_PATH.read_text("utf-8"))
    except FileNotFoundError as exc:  # pragma: no cover - packaging guard
        raise SnapshotValidationError("schema-not-found", str(SCHEMA_PATH)) from exc


def _invariant(detail: str) -> None:
    raise SnapshotValidationError("invariant-violation", detail)


def _manual_validate(payload: Dict[str, Any]) -> None:
    grid = payload["grid"]
    if grid and len(grid) != 81:
        _invariant("grid must be empty or hold 81 cells")
    for index, cell in enumerate(grid):
        if (cell["row"], cell["col"]) != divmod(index, 9):
            _invariant(f"grid[{index}] is out of row-major order")
        if cell["value"] == 0 and cell["error"]:
            _invariant(f"grid[{index}] is empty but flagged as an error")
    counts = payload["number_counts"]
    if grid:
        for digit in range(1, 10):
            actual = sum(1 for cell in grid if cell["value"] == digit)
            if counts[str(digit)] != actual:
                _invariant(f"number_counts[{digit}] does not match the grid")


def validate_snapshot(payload: Dict[str, Any]) -> None:
    """Validate ``payload`` produced by ``GameState.to_payload``."""

    schema = load_schema()
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    validator = validator_cls(schema)
    try:
        validator.validate(payload)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise SnapshotValidationError("snapshot-invalid", f"{location}:{exc.message}") from exc

    _manual_validate(payload)
