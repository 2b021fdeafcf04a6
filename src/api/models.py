"""Requests and Response models"""

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ValidationInfo, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color

# e2e4, e7e8q, ... (the null move "0000" is never legal, so no need to accept it here)
UCI_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")


def _non_negative(name: str, value: int) -> int:
    if value < 0:
        raise InvalidRequestError(f"{name} must be non-negative (milliseconds), got {value}")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None
    time_limit: Optional[int] = None  # milliseconds, None --> configured default
    increment: Optional[int] = None  # milliseconds, None --> configured default

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        """Only a structural check. Whether the position makes sense is up to the Rule Engine."""
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()

    @field_validator("time_limit", "increment")
    @classmethod
    def validate_duration(
        cls, value: Optional[int], info: ValidationInfo
    ) -> Optional[int]:
        if value is None:
            return value
        return _non_negative(info.field_name, value)


class MoveRequest(BaseModel):
    game_id: UUID
    uci_move: str
    time_taken: int

    @field_validator("uci_move")
    @classmethod
    def validate_uci_move(cls, value: str) -> str:
        if not UCI_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a move in UCI notation."
            )
        return value

    @field_validator("time_taken")
    @classmethod
    def validate_time_taken(cls, value: int) -> int:
        return _non_negative("time_taken", value)


class UndoMoveRequest(BaseModel):
    game_id: UUID


class GetGameRequest(BaseModel):
    game_id: UUID


class ImportGameRequest(BaseModel):
    """A game in its stored JSON shape (see src/core/serialization.py)."""

    data: str


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class MoveEntry(BaseModel):
    uci_move: str
    time_taken: int


class GameResponse(BaseModel):
    game_id: UUID
    starting_state: str
    fen_state: str
    move_history: list[MoveEntry]
    turn: Color
    start_time: int
    time_limit: int
    increment: int
    is_checkmate: bool


class ClockResponse(BaseModel):
    game_id: UUID
    taken_at: int
    turn: Color
    white_used_time: int
    black_used_time: int
    white_remaining_time: int
    black_remaining_time: int
    is_white_time_over: bool
    is_black_time_over: bool
    is_checkmate: bool


class ExportGameResponse(BaseModel):
    game_id: UUID
    data: str
