"""A played move as the game remembers it."""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import InvalidDurationError
from src.core.models import MoveModel


@dataclass(frozen=True)
class MoveRecord:
    """
    UCI notation + the time (ms) the player thought before committing the move.

    NOTE: The notation is forwarded to the Rule Engine as-is. Who made the move is not stored: it follows from replaying the game.
    """

    uci_move: str
    time_taken: int

    def __post_init__(self) -> None:
        if self.time_taken < 0:
            raise InvalidDurationError(
                f"time_taken must be non-negative, got {self.time_taken} for move {self.uci_move!r}"
            )

    @classmethod
    def from_model(cls, model: MoveModel) -> Self:
        return cls(uci_move=model.uci_move, time_taken=model.time_taken)

    def to_model(self) -> MoveModel:
        return MoveModel(uci_move=self.uci_move, time_taken=self.time_taken)
