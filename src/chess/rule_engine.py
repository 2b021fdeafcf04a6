"""
Chess rules are not implemented here. This module wraps python-chess behind a small capability surface
(legality, applying moves, turn, checkmate, FEN in/out) so the game/time logic never touches a board directly.
"""

from typing import Protocol

import chess

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

# Positions are opaque to the rest of the application. Only a RuleEngine looks inside.
Position = chess.Board

_COLOR_FROM_TURN: dict[chess.Color, Color] = {
    chess.WHITE: Color.WHITE,
    chess.BLACK: Color.BLACK,
}


class RuleEngine(Protocol):
    """What the game needs from a chess library."""

    def starting_position(self) -> Position:
        """Canonical initial position."""
        ...

    def parse_position(self, fen: str) -> Position:
        """Build a position from FEN. Raises InvalidFENError for malformed or impossible positions."""
        ...

    def render_position(self, position: Position) -> str:
        """Inverse of parse_position."""
        ...

    def apply(self, position: Position, uci_move: str) -> tuple[bool, Position]:
        """Try the move on a copy of the position. Returns (is_legal, resulting position). Never mutates the input."""
        ...

    def turn_to_move(self, position: Position) -> Color: ...

    def is_checkmate(self, position: Position) -> bool: ...


class PythonChessRules:
    """RuleEngine implemented with python-chess."""

    def starting_position(self) -> Position:
        return chess.Board()

    def parse_position(self, fen: str) -> Position:
        try:
            board = chess.Board(fen)
        except ValueError as error:
            raise InvalidFENError(f"Invalid FEN {fen!r}: {error}", fen=fen) from error

        if not board.is_valid():
            raise InvalidFENError(
                f"FEN {fen!r} does not describe a legal position: {board.status()!r}",
                fen=fen,
            )
        return board

    def render_position(self, position: Position) -> str:
        return position.fen()

    def apply(self, position: Position, uci_move: str) -> tuple[bool, Position]:
        board = position.copy(stack=False)
        try:
            move = chess.Move.from_uci(uci_move)
        except chess.InvalidMoveError:
            return False, board

        if move not in board.legal_moves:
            return False, board

        board.push(move)
        return True, board

    def turn_to_move(self, position: Position) -> Color:
        return _COLOR_FROM_TURN[position.turn]

    def is_checkmate(self, position: Position) -> bool:
        return position.is_checkmate()
