"""Orchestration of communication from a presentation layer to the token engine and persistence layers (and the reverse direction)."""

import logging
import threading
from collections.abc import Callable
from uuid import UUID

from token_chess.api.models import (
    ActionResponse,
    ClickSquareRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalDestinationsRequest,
    LegalDestinationsResponse,
    MoveRequest,
    MoveView,
    PendingSwapView,
    SelectionView,
    SelectNeutralTokenRequest,
    SelectPieceRequest,
)
from token_chess.core.exceptions import RepositoryError
from token_chess.core.models import GameModel
from token_chess.core.shared_types import Owner
from token_chess.db.database import SessionLocal
from token_chess.db.repository import GameRepository
from token_chess.db.sql_repository import SQLGameRepository
from token_chess.engine.game import TokenGame
from token_chess.engine.outcomes import ActionResult
from token_chess.rules.square import Square
from token_chess.tokens.pool import TokenRef

logger = logging.getLogger(__name__)


class TokenChessService:
    """
    Orchestration of layers for token chess.

    Every command on a game runs under that game's lock: one request is fully resolved
    (load, act, store) before the next one for the same game starts.

    The repository (one SQLAlchemy Session for the SQL one) is not safe to share between threads,
    so every call into it goes through a single repository lock. Commands on different games
    only wait for each other while loading or storing.
    """

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository
        self._locks: dict[UUID, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._repo_lock = threading.Lock()

    # -- Lifecycle ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Set up a board and the token pools."""

        new_game = TokenGame.new_game(
            starting_fen=request.starting_fen,
            pools=request.pools,
            preset=request.preset,
            policy=request.requirement_policy,
        )
        with self._repo_lock:
            _, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by a frontend to redraw the board, pools and turn indicator.
        """
        game = TokenGame.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def legal_destinations(
        self, request: LegalDestinationsRequest
    ) -> LegalDestinationsResponse:
        """Squares the currently selected piece may move to."""
        game = TokenGame.from_model(self._fetch_game(request.game_id))
        selection = game.selection
        return LegalDestinationsResponse(
            game_id=request.game_id,
            square=selection.origin.to_algebraic() if selection else None,
            destinations=[square.to_algebraic() for square in game.legal_destinations()],
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self._lock_for(request.game_id):
            with self._repo_lock:
                self.repo.delete_game(request.game_id)
        self._forget_lock(request.game_id)
        logger.info("Deleted game %s", request.game_id)

    # -- Player actions ---
    def select_piece(self, request: SelectPieceRequest) -> ActionResponse:
        square = Square.from_algebraic(request.square)
        return self._act(request.game_id, lambda game: game.attempt_select_piece(square))

    def make_move(self, request: MoveRequest) -> ActionResponse:
        destination = Square.from_algebraic(request.to_square)
        return self._act(request.game_id, lambda game: game.attempt_move(destination))

    def select_neutral_token(self, request: SelectNeutralTokenRequest) -> ActionResponse:
        chosen = TokenRef(Owner.NEUTRAL, request.slot)
        return self._act(
            request.game_id, lambda game: game.attempt_select_neutral_token(chosen)
        )

    def click_square(self, request: ClickSquareRequest) -> ActionResponse:
        return self._act(
            request.game_id, lambda game: game.click_square(request.row, request.col)
        )

    # -- Internal helpers --
    def _act(
        self, game_id: UUID, action: Callable[[TokenGame], ActionResult]
    ) -> ActionResponse:
        """
        1. Retrieve persisted GameModel from repository
        2. Rebuild the TokenGame and let it handle the action
        3. Store the result (an illegal move still drops the selection, so rejections are stored too)
        4. Report outcome + current state
        """
        with self._lock_for(game_id):
            try:
                model = self._fetch_game(game_id)
            except RepositoryError:
                self._forget_lock(game_id)
                raise
            game = TokenGame.from_model(model)
            result = action(game)
            with self._repo_lock:
                self.repo.update_game(game_id, game.to_model())
            return self._create_action_response(game_id, game, result)

    def _lock_for(self, game_id: UUID) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(game_id, threading.Lock())

    def _forget_lock(self, game_id: UUID) -> None:
        with self._locks_guard:
            self._locks.pop(game_id, None)

    def _create_action_response(
        self, game_id: UUID, game: TokenGame, result: ActionResult
    ) -> ActionResponse:
        move = (
            MoveView(
                uci=result.move.uci,
                san=result.move.san,
                is_capture=result.move.is_capture,
                is_check=result.move.is_check,
                is_checkmate=result.move.is_checkmate,
                is_stalemate=result.move.is_stalemate,
            )
            if result.move
            else None
        )
        return ActionResponse(
            game_id=game_id,
            outcome=result.outcome,
            ok=result.ok,
            detail=result.detail,
            move=move,
            game=self._create_game_response(game_id, game),
        )

    def _create_game_response(self, game_id: UUID, game: TokenGame) -> GameResponse:
        """Convert a TokenGame into a GameResponse (for game with given ID.)"""
        model = game.to_model()
        selection = game.selection
        pending = game.pending_swap
        return GameResponse(
            game_id=game_id,
            fen_state=model.current_fen,
            turn_owner=game.turn_owner,
            turn_state=game.turn_state,
            status=game.status,
            pools=model.pools,
            required_types=model.required_types,
            selection=(
                SelectionView(
                    square=selection.origin.to_algebraic(),
                    piece=selection.piece.kind.value,
                    owner=selection.piece.owner,
                    token_slot=(
                        selection.selected_token.slot
                        if selection.selected_token
                        else None
                    ),
                )
                if selection
                else None
            ),
            pending_swap=(
                PendingSwapView(
                    spending_owner=pending.spending_owner,
                    spent_slot=pending.spent_token.slot,
                )
                if pending
                else None
            ),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        with self._repo_lock:
            game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def create_service() -> TokenChessService:
    """Service backed by the configured database (in-memory SQLite unless TOKEN_CHESS_DATABASE_URL says otherwise)."""
    return TokenChessService(SQLGameRepository(SessionLocal()))
