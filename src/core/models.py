"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The domain layer (ChessGame), the persistence layer (repository) and the wire codec (serialization.py) all speak GameModel,
so none of them needs to know about the others' internal representation.
"""

from dataclasses import dataclass, field

# Type aliases to make GameModel easier to read
FEN = str
Milliseconds = int


@dataclass
class MoveModel:
    """A single played move: UCI notation + the time the player spent on it."""

    uci_move: str
    time_taken: Milliseconds


@dataclass
class GameModel:
    """Transport-safe representation of a timed chess game. Holds exactly the persisted fields."""

    initial_board: FEN
    moves: list[MoveModel] = field(default_factory=list)
    start_time: Milliseconds = 0
    time_limit: Milliseconds = 0
    increment: Milliseconds = 0
