"""Unit tests for src/core/serialization.py"""

import json
from copy import deepcopy
from typing import Any

import pytest

from src.chess.game import ChessGame, ChessGameBuilder
from src.chess.moves import MoveRecord
from src.core.exceptions import (
    DuplicateFieldError,
    InvalidFENError,
    InvalidGameDataError,
    MissingFieldError,
)
from src.core.models import GameModel, MoveModel
from src.core.serialization import dumps, loads, model_from_dict, model_to_dict

from tests.conftest import NOW

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

STORED_GAME: dict[str, Any] = {
    "initial_board": STARTING_FEN,
    "moves": [
        {"uci_move": "e2e4", "time_taken": 1000},
        {"uci_move": "a7a6", "time_taken": 1000},
    ],
    "start_time": NOW,
    "time_limit": 180_000,
    "increment": 10,
}


def test_model_to_dict() -> None:
    model = GameModel(
        initial_board=STARTING_FEN,
        moves=[MoveModel("e2e4", 1000), MoveModel("a7a6", 1000)],
        start_time=NOW,
        time_limit=180_000,
        increment=10,
    )
    assert model_to_dict(model) == STORED_GAME


def test_model_from_dict() -> None:
    model = model_from_dict(STORED_GAME)
    assert model.initial_board == STARTING_FEN
    assert model.moves == [MoveModel("e2e4", 1000), MoveModel("a7a6", 1000)]
    assert model.start_time == NOW
    assert model.time_limit == 180_000
    assert model.increment == 10


def test_game_survives_a_roundtrip() -> None:
    """Serialize a played game, load it back: same history, times and current position."""
    game = (
        ChessGameBuilder(clock=lambda: NOW)
        .with_time_limit(180_000)
        .with_increment(10)
        .build()
    )
    for uci_move, time_taken in [("e2e4", 1000), ("a7a6", 1000), ("g1h3", 500)]:
        game.play_move(MoveRecord(uci_move, time_taken))

    restored = ChessGame.from_model(loads(dumps(game.to_model())))

    assert restored.moves == game.moves
    assert restored.start_time == game.start_time
    assert restored.time_limit == game.time_limit
    assert restored.increment == game.increment
    assert restored.compute_current_board() == game.compute_current_board()
    assert restored == game


@pytest.mark.parametrize(
    "field", ["initial_board", "moves", "start_time", "time_limit", "increment"]
)
def test_missing_field(field: str) -> None:
    """Every field is required. The error names the missing one."""
    data = deepcopy(STORED_GAME)
    del data[field]
    with pytest.raises(MissingFieldError) as error:
        model_from_dict(data)
    assert error.value.field == field
    assert field in str(error.value)


def test_missing_nested_field() -> None:
    data = deepcopy(STORED_GAME)
    del data["moves"][1]["time_taken"]
    with pytest.raises(MissingFieldError) as error:
        model_from_dict(data)
    assert error.value.field == "moves.1.time_taken"


def test_duplicate_field() -> None:
    raw = json.dumps(STORED_GAME)[:-1] + ', "increment": 20}'
    with pytest.raises(DuplicateFieldError) as error:
        loads(raw)
    assert error.value.field == "increment"


@pytest.mark.parametrize(
    "field, value",
    [
        ("start_time", "yesterday"),
        ("time_limit", -1),
        ("increment", 1.5),
        ("moves", "e2e4 e7e5"),
        ("initial_board", None),
    ],
)
def test_invalid_field_values(field: str, value: Any) -> None:
    data = deepcopy(STORED_GAME)
    data[field] = value
    with pytest.raises(InvalidGameDataError):
        model_from_dict(data)


def test_unknown_field() -> None:
    data = deepcopy(STORED_GAME) | {"players": {"white": "somebody"}}
    with pytest.raises(InvalidGameDataError):
        model_from_dict(data)


def test_not_json() -> None:
    with pytest.raises(InvalidGameDataError):
        loads("{definitely not json")


def test_stored_fen_is_checked_when_building_the_game() -> None:
    data = deepcopy(STORED_GAME)
    data["initial_board"] = "garbage"
    model = model_from_dict(data)
    with pytest.raises(InvalidFENError) as error:
        ChessGame.from_model(model)
    assert error.value.fen == "garbage"


def test_not_utf8() -> None:
    with pytest.raises(InvalidGameDataError):
        loads(b'{"initial_board": "\xff"}')
