"""Unit tests for src/chess/rule_engine.py"""

import chess
import pytest

from src.chess.rule_engine import PythonChessRules
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


def test_starting_position(rules: PythonChessRules) -> None:
    board = rules.starting_position()
    assert rules.render_position(board) == STARTING_FEN
    assert rules.turn_to_move(board) == Color.WHITE


def test_parse_and_render_position(rules: PythonChessRules) -> None:
    fen = "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9"
    board = rules.parse_position(fen)
    assert rules.render_position(board) == fen
    assert rules.turn_to_move(board) == Color.BLACK


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "",
        "nonsense",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # unknown color to move
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # rank with 9 files
        "8/8/8/8/8/8/8/8 w - - 0 1",  # parses, but there are no kings
    ],
)
def test_invalid_position(rules: PythonChessRules, invalid_fen: str) -> None:
    """The offending FEN travels along with the exception."""
    with pytest.raises(InvalidFENError) as error:
        rules.parse_position(invalid_fen)
    assert error.value.fen == invalid_fen


def test_apply_legal_move(rules: PythonChessRules) -> None:
    board = rules.starting_position()
    is_legal, after = rules.apply(board, "e2e4")
    assert is_legal
    assert after.piece_at(chess.E4) == chess.Piece(chess.PAWN, chess.WHITE)
    assert rules.turn_to_move(after) == Color.BLACK


def test_apply_does_not_mutate_input(rules: PythonChessRules) -> None:
    board = rules.starting_position()
    rules.apply(board, "e2e4")
    assert rules.render_position(board) == STARTING_FEN


@pytest.mark.parametrize(
    "uci_move",
    [
        "e2e5",  # pawn cannot jump 3 squares
        "e7e5",  # not black's turn
        "a1a2",  # own piece in the way
        "nonsense",  # not UCI at all
        "0000",  # null move
    ],
)
def test_apply_illegal_move(rules: PythonChessRules, uci_move: str) -> None:
    is_legal, _ = rules.apply(rules.starting_position(), uci_move)
    assert not is_legal


def test_checkmate(rules: PythonChessRules) -> None:
    assert rules.is_checkmate(rules.parse_position(FOOLS_MATE_FEN))
    assert not rules.is_checkmate(rules.starting_position())
