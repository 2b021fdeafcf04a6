"""
Custom exceptions shared by all layers.

Everything derives from GameError so the service / API layers can catch one top-level type.
"""

from typing import Optional


class GameError(Exception):
    """Top-level exception for anything going wrong while handling a game."""


# --- DOMAIN ---
class IllegalMoveError(GameError):
    """The Rule Engine rejected the move against the current position."""


class EmptyHistoryError(GameError):
    """Tried undoing a move when no moves were played."""


class InvalidFENError(GameError):
    """Position notation could not be parsed into a valid position."""

    def __init__(self, message: str, fen: Optional[str] = None) -> None:
        super().__init__(message)
        self.fen = fen


class InvalidDurationError(GameError):
    """Durations (time taken, time limit, increment) must be non-negative milliseconds."""


class GameStateError(GameError):
    """The stored history can no longer be replayed. Points at a corrupted record, not at a user mistake."""


# --- DESERIALIZATION ---
class DeserializationError(GameError):
    """Persisted game data is structurally incomplete or malformed."""


class MissingFieldError(DeserializationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field!r}")
        self.field = field


class DuplicateFieldError(DeserializationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Duplicate field: {field!r}")
        self.field = field


class InvalidGameDataError(DeserializationError):
    """Fields are present but hold values of the wrong shape / type."""


# --- SERVICE / API ---
class RepositoryError(GameError):
    """Record could not be found (or stored) in the repository."""


class InvalidRequestError(GameError):
    """Incoming request does not pass validation."""
