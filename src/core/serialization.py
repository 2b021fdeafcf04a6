"""
Wire codec for GameModel.

A stored game is an object with exactly five fields:

    {
        "initial_board": "<FEN>",
        "moves": [{"uci_move": "e2e4", "time_taken": 1000}, ...],
        "start_time": <ms since epoch>,
        "time_limit": <ms>,
        "increment": <ms>
    }

Validation is done by pydantic; its errors get translated into our own DeserializationError family
so callers never have to know pydantic is involved.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from src.core.exceptions import (
    DuplicateFieldError,
    InvalidGameDataError,
    MissingFieldError,
)
from src.core.models import GameModel, MoveModel


class SerializedMove(BaseModel):
    model_config = ConfigDict(extra="forbid")

    uci_move: StrictStr
    time_taken: StrictInt = Field(ge=0)


class SerializedGame(BaseModel):
    model_config = ConfigDict(extra="forbid")

    initial_board: StrictStr
    moves: list[SerializedMove]
    start_time: StrictInt = Field(ge=0)
    time_limit: StrictInt = Field(ge=0)
    increment: StrictInt = Field(ge=0)


def model_to_dict(model: GameModel) -> dict[str, Any]:
    return {
        "initial_board": model.initial_board,
        "moves": [
            {"uci_move": move.uci_move, "time_taken": move.time_taken}
            for move in model.moves
        ],
        "start_time": model.start_time,
        "time_limit": model.time_limit,
        "increment": model.increment,
    }


def model_from_dict(data: Any) -> GameModel:
    """
    Validate raw (already decoded) data and build a GameModel.
    ---

    * missing field --> MissingFieldError naming the (dotted) field path
    * anything else structurally wrong --> InvalidGameDataError
    """
    try:
        parsed = SerializedGame.model_validate(data)
    except ValidationError as error:
        raise _translate(error) from error

    return GameModel(
        initial_board=parsed.initial_board,
        moves=[
            MoveModel(uci_move=move.uci_move, time_taken=move.time_taken)
            for move in parsed.moves
        ],
        start_time=parsed.start_time,
        time_limit=parsed.time_limit,
        increment=parsed.increment,
    )


def dumps(model: GameModel) -> str:
    return json.dumps(model_to_dict(model))


def loads(raw: str | bytes) -> GameModel:
    """Decode a JSON document. Objects carrying the same key twice are rejected instead of silently keeping the last value."""
    try:
        data = json.loads(raw, object_pairs_hook=_reject_duplicate_keys)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise InvalidGameDataError(f"Stored game is not valid JSON: {error}") from error
    return model_from_dict(data)


# -- Internal helpers --
def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    decoded: dict[str, Any] = {}
    for key, value in pairs:
        if key in decoded:
            raise DuplicateFieldError(key)
        decoded[key] = value
    return decoded


def _translate(error: ValidationError) -> Exception:
    """Report the first missing field if there is one, otherwise summarize all problems."""
    for detail in error.errors():
        if detail["type"] == "missing":
            return MissingFieldError(_field_path(detail["loc"]))

    problems = "; ".join(
        f"{_field_path(detail['loc']) or '<root>'}: {detail['msg']}"
        for detail in error.errors()
    )
    return InvalidGameDataError(f"Invalid stored game: {problems}")


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc)
