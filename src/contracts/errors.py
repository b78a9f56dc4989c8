"""Shared error types for the game engine."""

from __future__ import annotations

from typing import Optional


class SessionError(Exception):
    """Base class for errors raised by the engine."""


class SessionInputError(SessionError, ValueError):
    """Raised when a caller passes coordinates or digits outside the board."""


class GenerationError(SessionError, RuntimeError):
    """Raised when the generator cannot complete a solved grid."""


class SnapshotValidationError(SessionError, RuntimeError):
    """Exception raised when a published snapshot violates its contract."""

    def __init__(self, code: str, detail: Optional[str] = None) -> None:
        self.code = code
        self.detail = detail
        message = code if detail is None else f"{code}:{detail}"
        super().__init__(message)


def check_coordinate(name: str, value: int) -> int:
    """Return ``value`` if it addresses a row or column, else raise."""

    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 8:
        raise SessionInputError(f"{name} must be in [0, 8], got {value!r}")
    return value


def check_digit(value: int) -> int:
    """Return ``value`` if it is a placeable digit, else raise."""

    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 9:
        raise SessionInputError(f"digit must be in [1, 9], got {value!r}")
    return value


__all__ = [
    "GenerationError",
    "SessionError",
    "SessionInputError",
    "SnapshotValidationError",
    "check_coordinate",
    "check_digit",
]
