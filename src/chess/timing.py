"""
Time accounting for a ChessGame (Fischer increment).

All functions are pure queries over the game's move history. Which side made a move is never stored:
a move belongs to White if, after it was applied, the Rule Engine says it is Black's turn (and vice versa).

Two families of metrics:

* pure time: summed time_taken of a side's moves.
* time with increment: after every one of the side's moves the running total is reduced by the increment,
  but never below zero. A fast move can therefore wipe out earlier accumulated time.

The clock reading of a side ("used time") adds the thinking time of the move that is still in progress,
but only for the side whose turn it is.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from src.chess.game import ChessGame
from src.chess.moves import MoveRecord
from src.core.clock import current_time_ms
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockReading:
    """Everything a client needs to draw both clocks, taken at a single instant."""

    taken_at: int
    turn: Color
    white_used_time: int
    black_used_time: int
    white_remaining_time: int
    black_remaining_time: int
    is_white_time_over: bool
    is_black_time_over: bool
    is_checkmate: bool


def moves_by_color(game: ChessGame) -> Iterator[tuple[Color, MoveRecord]]:
    """Attribute every played move to the side that made it: the opponent of whoever is to move afterwards."""
    rules = game.rules
    for move, board_after in game.replay():
        yield rules.turn_to_move(board_after).opponent, move


# --- PURE TIME ---
def compute_moves_pure_time(game: ChessGame, color: Color) -> int:
    return sum(move.time_taken for mover, move in moves_by_color(game) if mover == color)


def compute_white_moves_pure_time(game: ChessGame) -> int:
    return compute_moves_pure_time(game, Color.WHITE)


def compute_black_moves_pure_time(game: ChessGame) -> int:
    return compute_moves_pure_time(game, Color.BLACK)


def compute_total_moves_pure_time(game: ChessGame) -> int:
    return sum(move.time_taken for move in game.moves)


# --- TIME WITH INCREMENT ---
def compute_moves_time_with_increment(game: ChessGame, color: Color) -> int:
    """
    Apply the increment after every move of `color`, one move at a time.
    ---

    If the running total is smaller than the increment it gets floored to 0. The unused part of the
    increment is NOT carried over to later moves.
    """
    elapsed_time = 0
    for mover, move in moves_by_color(game):
        if mover != color:
            continue
        elapsed_time += move.time_taken
        if elapsed_time >= game.increment:
            elapsed_time -= game.increment
        else:
            elapsed_time = 0
    return elapsed_time


def compute_white_moves_time_with_increment(game: ChessGame) -> int:
    return compute_moves_time_with_increment(game, Color.WHITE)


def compute_black_moves_time_with_increment(game: ChessGame) -> int:
    return compute_moves_time_with_increment(game, Color.BLACK)


# --- WALL CLOCK DEPENDENT ---
def compute_current_move_time(game: ChessGame, now: Optional[int] = None) -> int:
    """
    Thinking time of the move that has not been played yet:
    now - (start of the game + time spent on all committed moves).

    If the clock seems to have gone backwards the result is clamped to 0.
    """
    now = current_time_ms() if now is None else now
    current_move_started = game.start_time + compute_total_moves_pure_time(game)
    if now < current_move_started:
        logger.warning(
            "Clock anomaly: now (%d) is %d ms before the current move started (%d). Clamping to 0.",
            now,
            current_move_started - now,
            current_move_started,
        )
        return 0
    return now - current_move_started


def compute_total_elapsed_time(game: ChessGame, now: Optional[int] = None) -> int:
    """Wall-clock time since the game started, reconstructed from the history (survives a reload of the game)."""
    return (
        compute_white_moves_pure_time(game)
        + compute_black_moves_pure_time(game)
        + compute_current_move_time(game, now)
    )


def compute_used_time(game: ChessGame, color: Color, now: Optional[int] = None) -> int:
    """The clock reading of `color`. Only the side to move is charged for the move in progress."""
    used_time = compute_moves_time_with_increment(game, color)
    if game.turn() == color:
        used_time += compute_current_move_time(game, now)
    return used_time


def compute_white_used_time(game: ChessGame, now: Optional[int] = None) -> int:
    return compute_used_time(game, Color.WHITE, now)


def compute_black_used_time(game: ChessGame, now: Optional[int] = None) -> int:
    return compute_used_time(game, Color.BLACK, now)


def is_time_over(game: ChessGame, color: Color, now: Optional[int] = None) -> bool:
    return compute_used_time(game, color, now) > game.time_limit


def is_white_time_over(game: ChessGame, now: Optional[int] = None) -> bool:
    return is_time_over(game, Color.WHITE, now)


def is_black_time_over(game: ChessGame, now: Optional[int] = None) -> bool:
    return is_time_over(game, Color.BLACK, now)


def is_checkmate(game: ChessGame) -> bool:
    return game.rules.is_checkmate(game.compute_current_board())


def read_clocks(game: ChessGame, now: Optional[int] = None) -> ClockReading:
    """Snapshot of both clocks. Pins `now` once so both sides are read at the same instant."""
    now = current_time_ms() if now is None else now
    white_used = compute_white_used_time(game, now)
    black_used = compute_black_used_time(game, now)
    return ClockReading(
        taken_at=now,
        turn=game.turn(),
        white_used_time=white_used,
        black_used_time=black_used,
        white_remaining_time=max(game.time_limit - white_used, 0),
        black_remaining_time=max(game.time_limit - black_used, 0),
        is_white_time_over=white_used > game.time_limit,
        is_black_time_over=black_used > game.time_limit,
        is_checkmate=is_checkmate(game),
    )
