"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel, MoveModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            initial_board=game.initial_board,
            moves=self._encode_moves(game.moves),
            start_time=game.start_time,
            time_limit=game.time_limit,
            increment=game.increment,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Stored new game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        # NOTE start_time / time_limit / increment never change during a game, but the record mirrors the model as a whole.
        game_db.initial_board = game.initial_board
        game_db.moves = self._encode_moves(game.moves)
        game_db.start_time = game.start_time
        game_db.time_limit = game.time_limit
        game_db.increment = game.increment
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Updated game %s (%d moves)", game_id, len(game.moves))
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.debug("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _encode_moves(self, moves: list[MoveModel]) -> list[dict]:
        """JSON column: store plain dicts. A new list every time, so SQLAlchemy sees the change."""
        return [
            {"uci_move": move.uci_move, "time_taken": move.time_taken} for move in moves
        ]

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            initial_board=game_db.initial_board,
            moves=[
                MoveModel(uci_move=move["uci_move"], time_taken=move["time_taken"])
                for move in game_db.moves
            ],
            start_time=game_db.start_time,
            time_limit=game_db.time_limit,
            increment=game_db.increment,
        )
