"""Unit tests for src/chess/moves.py"""

from dataclasses import FrozenInstanceError

import pytest

from src.chess.moves import MoveRecord
from src.core.exceptions import InvalidDurationError
from src.core.models import MoveModel


def test_move_record_from_and_to_model() -> None:
    model = MoveModel(uci_move="e2e4", time_taken=1000)
    move = MoveRecord.from_model(model)
    assert move == MoveRecord("e2e4", 1000)
    assert move.to_model() == model


def test_zero_time_is_allowed() -> None:
    """Pre-moves can be committed instantly."""
    assert MoveRecord("e2e4", 0).time_taken == 0


def test_negative_time_taken() -> None:
    with pytest.raises(InvalidDurationError):
        MoveRecord("e2e4", -1)


def test_move_record_is_immutable() -> None:
    move = MoveRecord("e2e4", 1000)
    with pytest.raises(FrozenInstanceError):
        move.time_taken = 0  # type: ignore[misc]
