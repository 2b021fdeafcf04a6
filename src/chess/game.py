"""
The ChessGame class is the entrypoint into the domain layer for the service layer.

It owns the starting position and the ordered list of played moves. Every position is derived by replaying
that list through the Rule Engine, so there is never a second copy of the board that could drift out of sync.
The time accounting built on top of this lives in src/chess/timing.py.
"""

import logging
from typing import Iterator, Optional, Self

from src.chess.moves import MoveRecord
from src.chess.rule_engine import Position, PythonChessRules, RuleEngine
from src.core.clock import Clock, current_time_ms
from src.core.config import load_settings
from src.core.exceptions import (
    EmptyHistoryError,
    GameStateError,
    IllegalMoveError,
    InvalidDurationError,
)
from src.core.models import GameModel
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


class ChessGame:
    """
    A single timed game session.
    ---

    * initial board, start time, time limit and increment are fixed once the game exists.
    * moves only grow through play_move() and only shrink (from the end) through undo_move().
    * every stored move was legal when it got appended. Replaying trusts that.
    """

    def __init__(
        self,
        initial_board: Position,
        moves: list[MoveRecord],
        start_time: int,
        time_limit: int,
        increment: int,
        rules: Optional[RuleEngine] = None,
    ) -> None:
        for name, value in (
            ("start_time", start_time),
            ("time_limit", time_limit),
            ("increment", increment),
        ):
            if value < 0:
                raise InvalidDurationError(f"{name} must be non-negative, got {value}")

        self._rules: RuleEngine = rules or PythonChessRules()
        self._initial_board = initial_board.copy()
        self._moves = list(moves)
        self._start_time = start_time
        self._time_limit = time_limit
        self._increment = increment

    # --- READ-ONLY STATE ---
    @property
    def initial_board(self) -> Position:
        """A copy: the starting position can never be changed from the outside."""
        return self._initial_board.copy()

    @property
    def moves(self) -> tuple[MoveRecord, ...]:
        return tuple(self._moves)

    @property
    def start_time(self) -> int:
        return self._start_time

    @property
    def time_limit(self) -> int:
        return self._time_limit

    @property
    def increment(self) -> int:
        return self._increment

    @property
    def rules(self) -> RuleEngine:
        return self._rules

    # --- CONVERSION (Service layer speaks GameModel) ---
    @classmethod
    def from_model(cls, model: GameModel, rules: Optional[RuleEngine] = None) -> Self:
        """Rebuild a game from stored data. A malformed initial FEN raises InvalidFENError and no game is created."""
        rules = rules or PythonChessRules()
        return cls(
            initial_board=rules.parse_position(model.initial_board),
            moves=[MoveRecord.from_model(move) for move in model.moves],
            start_time=model.start_time,
            time_limit=model.time_limit,
            increment=model.increment,
            rules=rules,
        )

    def to_model(self) -> GameModel:
        return GameModel(
            initial_board=self._rules.render_position(self._initial_board),
            moves=[move.to_model() for move in self._moves],
            start_time=self._start_time,
            time_limit=self._time_limit,
            increment=self._increment,
        )

    # --- POSITIONS ---
    def replay(self) -> Iterator[tuple[MoveRecord, Position]]:
        """
        Walk through the history, yielding every move together with the position right after it.

        NOTE: the Rule Engine still reports legality while replaying. A rejected move can only mean the history
        was corrupted outside of play_move() (e.g. a hand-edited record), so that is treated as a broken game.
        """
        board = self.initial_board
        for ply, move in enumerate(self._moves, start=1):
            is_legal, board = self._rules.apply(board, move.uci_move)
            if not is_legal:
                logger.error("Stored move %r (ply %d) cannot be replayed", move.uci_move, ply)
                raise GameStateError(
                    f"Stored move {move.uci_move!r} at ply {ply} cannot be replayed from the initial position."
                )
            yield move, board

    def compute_current_board(self) -> Position:
        board = self.initial_board
        for _, board in self.replay():
            pass
        return board

    def compute_board_at_turn(self, target_turn: int) -> Position:
        """
        Position after the first `target_turn` plies.
        turn 0 --> initial position, turn 1 --> position after the first move, etc.
        Asking for a turn beyond the history simply gives the current position.
        """
        if target_turn < 0:
            raise ValueError(f"target_turn must be non-negative, got {target_turn}")

        board = self.initial_board
        if target_turn == 0:
            return board
        for ply, (_, board) in enumerate(self.replay(), start=1):
            if ply == target_turn:
                break
        return board

    def turn(self) -> Color:
        """Whose turn it is now."""
        return self._rules.turn_to_move(self.compute_current_board())

    # --- MUTATIONS ---
    def is_move_legal(self, move: MoveRecord) -> bool:
        is_legal, _ = self._rules.apply(self.compute_current_board(), move.uci_move)
        return is_legal

    def play_move(self, move: MoveRecord) -> None:
        """Append the move if it is legal in the current position. Otherwise raise and leave the game as it was."""
        if not self.is_move_legal(move):
            logger.info("Rejected illegal move %r", move.uci_move)
            raise IllegalMoveError(f"Tried playing an illegal move: {move.uci_move!r}")

        self._moves.append(move)
        logger.debug(
            "Played %r after %d ms (ply %d)", move.uci_move, move.time_taken, len(self._moves)
        )

    def undo_move(self) -> MoveRecord:
        """Take back the last move and return it."""
        if not self._moves:
            raise EmptyHistoryError(
                "Tried undoing a move when there are no moves to undo"
            )
        move = self._moves.pop()
        logger.debug("Undid %r (ply %d)", move.uci_move, len(self._moves) + 1)
        return move

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChessGame):
            return NotImplemented
        return self.to_model() == other.to_model()

    def __repr__(self) -> str:
        return (
            f"ChessGame(initial_board={self._rules.render_position(self._initial_board)!r}, "
            f"moves={self._moves!r}, start_time={self._start_time}, "
            f"time_limit={self._time_limit}, increment={self._increment})"
        )


class ChessGameBuilder:
    """
    Collect the settings for a new game, then build() it.
    ---

    Defaults: canonical starting position, time limit / increment from the settings (environment).
    The start time is stamped when build() is called, not when the builder is created.
    """

    def __init__(
        self, rules: Optional[RuleEngine] = None, clock: Clock = current_time_ms
    ) -> None:
        settings = load_settings()
        self._rules: RuleEngine = rules or PythonChessRules()
        self._clock = clock
        self._initial_board: Position = self._rules.starting_position()
        self._time_limit = settings.time_limit
        self._increment = settings.increment

    def with_initial_board(self, board: Position) -> Self:
        """Goes through the same checks as a FEN: raises InvalidFENError for an impossible position."""
        self._initial_board = self._rules.parse_position(self._rules.render_position(board))
        return self

    def with_initial_fen(self, fen: str) -> Self:
        """Raises InvalidFENError straight away for a malformed FEN."""
        self._initial_board = self._rules.parse_position(fen)
        return self

    def with_time_limit(self, time_limit: int) -> Self:
        self._time_limit = time_limit
        return self

    def with_increment(self, increment: int) -> Self:
        self._increment = increment
        return self

    def build(self) -> ChessGame:
        game = ChessGame(
            initial_board=self._initial_board,
            moves=[],
            start_time=self._clock(),
            time_limit=self._time_limit,
            increment=self._increment,
            rules=self._rules,
        )
        logger.debug(
            "Built game: time_limit=%d ms, increment=%d ms", game.time_limit, game.increment
        )
        return game
