"""Error types and the published snapshot contract."""

from __future__ import annotations

from .errors import (
    GenerationError,
    SessionError,
    SessionInputError,
    SnapshotValidationError,
    check_coordinate,
    check_digit,
)

__all__ = [
    "GenerationError",
    "SessionError",
    "SessionInputError",
    "SnapshotValidationError",
    "check_coordinate",
    "check_digit",
]
