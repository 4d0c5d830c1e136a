"""Implementation of (Game)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from token_chess.core.models import GameModel
from token_chess.db.schema import DBGame

# Columns shared one-to-one between GameModel and DBGame
GAME_FIELDS: tuple[str, ...] = (
    "current_fen",
    "pools",
    "required_types",
    "requirement_policy",
    "turn_state",
    "status",
    "pending_swap_owner",
    "pending_swap_slot",
    "selected_square",
    "selected_token_slot",
)


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
        game_db = DBGame(id=new_id, **self._to_columns(game))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        for name, value in self._to_columns(game).items():
            setattr(game_db, name, value)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_columns(self, game: GameModel) -> dict[str, object]:
        """NOTE: JSON columns only notice re-assignment, so hand over fresh containers every time."""
        columns = {name: getattr(game, name) for name in GAME_FIELDS}
        columns["pools"] = {owner: list(kinds) for owner, kinds in game.pools.items()}
        columns["required_types"] = list(game.required_types)
        return columns

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(**{name: getattr(game_db, name) for name in GAME_FIELDS})
