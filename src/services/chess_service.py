"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    ClockResponse,
    CreateGameRequest,
    DeleteGameRequest,
    ExportGameResponse,
    GameResponse,
    GetGameRequest,
    ImportGameRequest,
    MoveEntry,
    MoveRequest,
    UndoMoveRequest,
)
from src.chess import timing
from src.chess.game import ChessGame, ChessGameBuilder
from src.chess.moves import MoveRecord
from src.chess.rule_engine import PythonChessRules, RuleEngine
from src.core import serialization
from src.core.clock import Clock, current_time_ms
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for a timed chess game."""

    def __init__(
        self,
        repository: GameRepository,
        rules: Optional[RuleEngine] = None,
        clock: Clock = current_time_ms,
    ) -> None:
        self.repo = repository
        self.rules: RuleEngine = rules or PythonChessRules()
        self.clock = clock

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game. The clocks start running right away."""

        builder = ChessGameBuilder(rules=self.rules, clock=self.clock)
        if request.starting_fen is not None:
            builder.with_initial_fen(request.starting_fen)
        if request.time_limit is not None:
            builder.with_time_limit(request.time_limit)
        if request.increment is not None:
            builder.with_increment(request.increment)
        new_game = builder.build()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)

        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Play a move. An illegal move raises IllegalMoveError and nothing is stored."""

        game = self._load_game(request.game_id)
        game.play_move(MoveRecord(uci_move=request.uci_move, time_taken=request.time_taken))
        return self._store(request.game_id, game)

    def undo_move(self, request: UndoMoveRequest) -> GameResponse:
        """Take back the last move. Raises EmptyHistoryError if there is none."""

        game = self._load_game(request.game_id)
        game.undo_move()
        return self._store(request.game_id, game)

    def get_clocks(self, request: GetGameRequest) -> ClockResponse:
        """
        Current clock readings.
        ----
        Used in "polling" loop by frontend. Values change between calls while a move is in progress.
        """
        game = self._load_game(request.game_id)
        reading = timing.read_clocks(game, now=self.clock())
        return ClockResponse(
            game_id=request.game_id,
            taken_at=reading.taken_at,
            turn=reading.turn,
            white_used_time=reading.white_used_time,
            black_used_time=reading.black_used_time,
            white_remaining_time=reading.white_remaining_time,
            black_remaining_time=reading.black_remaining_time,
            is_white_time_over=reading.is_white_time_over,
            is_black_time_over=reading.is_black_time_over,
            is_checkmate=reading.is_checkmate,
        )

    def export_game(self, request: GetGameRequest) -> ExportGameResponse:
        """Dump the game in its stored JSON shape."""
        game_model = self._fetch_game(request.game_id)
        return ExportGameResponse(
            game_id=request.game_id, data=serialization.dumps(game_model)
        )

    def import_game(self, request: ImportGameRequest) -> GameResponse:
        """
        Store a previously exported game under a new ID.
        ----
        The data is fully decoded into a ChessGame and its history replayed first, so malformed data,
        an invalid FEN or a move that cannot be replayed never reaches the repository.
        """
        game_model = serialization.loads(request.data)
        game = ChessGame.from_model(game_model, rules=self.rules)
        game.compute_current_board()
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info("Imported game %s (%d moves)", game_id, len(game.moves))
        return self._create_game_response(game_id, stored_game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = ChessGame.from_model(model, rules=self.rules)
        current_board = game.compute_current_board()
        return GameResponse(
            game_id=game_id,
            starting_state=model.initial_board,
            fen_state=self.rules.render_position(current_board),
            move_history=[
                MoveEntry(uci_move=move.uci_move, time_taken=move.time_taken)
                for move in model.moves
            ],
            turn=self.rules.turn_to_move(current_board),
            start_time=model.start_time,
            time_limit=model.time_limit,
            increment=model.increment,
            is_checkmate=self.rules.is_checkmate(current_board),
        )

    def _store(self, game_id: UUID, game: ChessGame) -> GameResponse:
        updated = self.repo.update_game(game_id, game.to_model())
        if updated is None:
            raise RepositoryError(f"Game with {game_id=} disappeared while updating.")
        return self._create_game_response(game_id, updated)

    def _load_game(self, game_id: UUID) -> ChessGame:
        return ChessGame.from_model(self._fetch_game(game_id), rules=self.rules)

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
