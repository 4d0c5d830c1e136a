"""
The TokenGame is the entrypoint into the domain layer for the service layer (the Move Mediator).

It sequences every player action:
legality check (rules engine) --> token requirement --> mandatory swap --> turn handoff.

Rejected actions are returned as an ActionResult and leave the game exactly as it was.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional, Self

from token_chess import config
from token_chess.core.exceptions import GameStateError, InvalidPoolError
from token_chess.core.models import GameModel
from token_chess.core.shared_types import (
    Color,
    Outcome,
    Owner,
    PieceType,
    RequirementPolicy,
    Status,
    TurnState,
)
from token_chess.engine.outcomes import ActionResult
from token_chess.engine.turn import TurnStateMachine
from token_chess.rules.engine import PythonChessRules, RulesEngine
from token_chess.rules.pieces import Piece
from token_chess.rules.square import Square
from token_chess.tokens.pool import Token, TokenPools, TokenRef
from token_chess.tokens.presets import preset_pools
from token_chess.tokens.requirements import RequirementResolver
from token_chess.tokens.swap import PendingSwap, perform_swap

logger = logging.getLogger(__name__)

# Pawns always promote to a queen. Not configurable.
PROMOTION_CHOICE = PieceType.QUEEN


@dataclass(frozen=True)
class Selection:
    """The piece a player picked up, and the token bound to pay for it (if its kind is token-gated)."""

    piece: Piece
    origin: Square
    selected_token: Optional[TokenRef] = None


@dataclass
class GameState:
    """Everything the token economy owns. Only the TokenGame mutates it."""

    pools: TokenPools
    requirements: RequirementResolver
    turn: TurnStateMachine = field(default_factory=TurnStateMachine)
    selection: Optional[Selection] = None
    policy: RequirementPolicy = RequirementPolicy.UNION_ALL_POOLS


@dataclass
class TokenGame:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    rules: RulesEngine
    state: GameState

    @classmethod
    def new_game(
        cls,
        starting_fen: Optional[str] = None,
        pools: Optional[Mapping[str, Sequence[str]]] = None,
        preset: Optional[str] = None,
        policy: Optional[RequirementPolicy] = None,
    ) -> Self:
        """
        Start a game.
        ----

        * Board: the supplied FEN, or the standard starting position
        * Pools: explicit pools win over a named preset, which wins over the configured default preset
        * Policy: which pools decide the token-gated piece kinds (configured default if not given)
        """
        rules = PythonChessRules.from_fen(starting_fen)
        token_pools = TokenPools(
            pools if pools is not None else preset_pools(preset or config.DEFAULT_POOL_PRESET)
        )
        policy = policy or config.DEFAULT_REQUIREMENT_POLICY
        requirements = RequirementResolver.at_game_start(token_pools, policy)

        # Every gated move must be followed by a swap with the bank: an empty bank would deadlock the first one.
        if requirements.required_types and not token_pools.get(Owner.NEUTRAL):
            raise InvalidPoolError(
                "The neutral pool cannot be empty while some piece kinds require a token."
            )

        logger.info(
            "New game: token-gated kinds %s, pools %s",
            requirements.to_names(),
            token_pools.to_names(),
        )
        return cls(rules, GameState(token_pools, requirements, policy=policy))

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a TokenGame from the information the Service layer actually has"""

        # Validation
        if model.turn_state not in set(TurnState):
            raise GameStateError(
                f"Invalid turn state: {model.turn_state!r}. \nPick one from {','.join(TurnState)}"
            )

        # create the game
        rules = PythonChessRules.from_fen(model.current_fen)
        pools = TokenPools(model.pools)
        requirements = RequirementResolver.from_names(model.required_types)
        turn = TurnStateMachine(cls._pending_swap_from_model(model, pools))
        if turn.state != TurnState(model.turn_state):
            raise GameStateError(
                f"Turn state {model.turn_state!r} does not match the pending swap "
                f"({model.pending_swap_owner}, {model.pending_swap_slot})."
            )
        selection = cls._selection_from_model(model, rules, pools, requirements)
        state = GameState(
            pools=pools,
            requirements=requirements,
            turn=turn,
            selection=selection,
            policy=RequirementPolicy(model.requirement_policy),
        )
        return cls(rules, state)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        pending = self.pending_swap
        selection = self.selection
        return GameModel(
            current_fen=self.rules.fen(),
            pools=self.state.pools.to_names(),
            required_types=self.state.requirements.to_names(),
            turn_state=self.turn_state.value,
            status=self.status.value,
            pending_swap_owner=pending.spending_owner.value if pending else None,
            pending_swap_slot=pending.spent_token.slot if pending else None,
            selected_square=selection.origin.to_algebraic() if selection else None,
            selected_token_slot=(
                selection.selected_token.slot
                if selection and selection.selected_token
                else None
            ),
            requirement_policy=self.state.policy.value,
        )

    # --- QUERIES FOR THE PRESENTATION LAYER ---
    @property
    def turn_state(self) -> TurnState:
        return self.state.turn.state

    @property
    def selection(self) -> Optional[Selection]:
        return self.state.selection

    @property
    def pending_swap(self) -> Optional[PendingSwap]:
        return self.state.turn.pending_swap

    @property
    def required_types(self) -> frozenset[PieceType]:
        return self.state.requirements.required_types

    @property
    def turn_owner(self) -> Color:
        """Side on move according to the rules engine. (During a swap the PREVIOUS mover still has to act.)"""
        return self.rules.turn_owner()

    @property
    def status(self) -> Status:
        return self.rules.status()

    def pool(self, owner: Owner) -> tuple[Token, ...]:
        return self.state.pools.get(owner)

    def pools(self) -> dict[Owner, tuple[Token, ...]]:
        return {owner: self.pool(owner) for owner in Owner}

    def legal_destinations(self) -> list[Square]:
        """Where the selected piece may go (for highlighting). Nothing selected, nothing to show."""
        if self.selection is None:
            return []
        return self.rules.legal_destinations(self.selection.origin)

    # --- COMMANDS ---
    def attempt_select_piece(self, square: Square) -> ActionResult:
        """
        Pick up the piece on `square`.
        ----

        1. No selecting at all while a swap is owed
        2. There must be a piece, and it must belong to the side on move
        3. Picking up the piece that is already selected puts it back down
        4. A token-gated piece needs a matching token in its owner's pool, which gets bound to the selection
        """
        if self.state.turn.awaiting_swap:
            return self._reject(
                Outcome.NOT_YOUR_TURN, "A neutral token must be chosen first."
            )

        piece = self.rules.piece_at(square)
        if piece is None:
            return self._reject(Outcome.EMPTY_SQUARE, f"No piece on {square}.")

        if piece.owner != self.rules.turn_owner():
            return self._reject(
                Outcome.NOT_YOUR_TURN,
                f"It is {self.rules.turn_owner()} to move, not {piece.owner}.",
            )

        if self.selection is not None and self.selection.origin == square:
            self.state.selection = None
            return ActionResult(Outcome.DESELECTED)

        selected_token: Optional[TokenRef] = None
        if self.state.requirements.requires_token(piece.kind):
            owner = Owner.of(piece.owner)
            selected_token = self.state.requirements.find_matching_token(
                self.state.pools, owner, piece.kind
            )
            if selected_token is None:
                return self._reject(
                    Outcome.NO_TOKEN_AVAILABLE,
                    f"{owner} holds no {piece.kind} token.",
                )

        self.state.selection = Selection(piece, square, selected_token)
        return ActionResult(Outcome.SELECTED)

    def attempt_move(self, destination: Square) -> ActionResult:
        """
        Move the selected piece to `destination`.
        ----

        The selection is single-shot: it is cleared whether the rules engine accepts the move or not.
        A legal move of a token-gated piece leaves the mover owing a swap (SELECT_NEUTRAL_TOKEN).
        """
        selection = self.selection
        if selection is None:
            return self._reject(Outcome.NO_ACTIVE_SELECTION, "Select a piece first.")

        gated = self.state.requirements.requires_token(selection.piece.kind)
        if gated and selection.selected_token is None:
            raise GameStateError(
                f"{selection.piece.kind} on {selection.origin} is selected without a token bound to it."
            )

        result = self.rules.attempt_move(
            selection.origin, destination, PROMOTION_CHOICE
        )
        self.state.selection = None

        if not result.ok:
            return self._reject(Outcome.ILLEGAL_MOVE, result.reason or "Illegal move.")

        if gated and selection.selected_token is not None:
            self.state.turn.begin_swap(
                PendingSwap(
                    spent_token=selection.selected_token,
                    spending_owner=Owner.of(selection.piece.owner),
                )
            )

        logger.info(
            "%s played %s%s",
            selection.piece.owner,
            result.report.san if result.report else destination,
            " and owes a swap" if self.state.turn.awaiting_swap else "",
        )
        return ActionResult(Outcome.MOVED, move=result.report)

    def attempt_select_neutral_token(self, chosen: TokenRef) -> ActionResult:
        """Pay the owed swap with the neutral token in `chosen`, which ends the mover's turn."""
        pending = self.pending_swap
        if pending is None:
            return self._reject(Outcome.NOT_AWAITING_SWAP, "No swap is owed.")

        outcome = perform_swap(self.state.pools, pending, chosen)
        if not outcome.ok:
            return self._reject(
                outcome, f"{chosen.owner} slot {chosen.slot} is not a neutral token."
            )

        self.state.turn.complete_swap()
        return ActionResult(Outcome.SWAPPED)

    def click_square(self, row: int, col: int) -> ActionResult:
        """
        A click on the board, in screen coordinates (row 0 = rank 8).

        Without a selection (or on the selected piece itself) the click picks up a piece, otherwise it is a destination.
        """
        square = Square.from_coords(row, col)
        if self.selection is None or self.selection.origin == square:
            return self.attempt_select_piece(square)
        return self.attempt_move(square)

    # -- PRIVATE HELPERS ---
    def _reject(self, outcome: Outcome, detail: str) -> ActionResult:
        logger.debug("Rejected (%s): %s", outcome, detail)
        return ActionResult.rejected(outcome, detail)

    @staticmethod
    def _pending_swap_from_model(
        model: GameModel, pools: TokenPools
    ) -> Optional[PendingSwap]:
        if model.pending_swap_owner is None or model.pending_swap_slot is None:
            return None
        owner = Owner(model.pending_swap_owner)
        spent = TokenRef(owner, model.pending_swap_slot)
        if owner == Owner.NEUTRAL or not pools.contains(spent):
            raise GameStateError(f"Pending swap refers to an unknown token: {spent}")
        return PendingSwap(spent_token=spent, spending_owner=owner)

    @staticmethod
    def _selection_from_model(
        model: GameModel,
        rules: RulesEngine,
        pools: TokenPools,
        requirements: RequirementResolver,
    ) -> Optional[Selection]:
        if model.selected_square is None:
            return None
        origin = Square.from_algebraic(model.selected_square)
        piece = rules.piece_at(origin)
        if piece is None:
            raise GameStateError(f"Selected square {origin} is empty.")
        token = (
            TokenRef(Owner.of(piece.owner), model.selected_token_slot)
            if model.selected_token_slot is not None
            else None
        )
        if token is not None and not pools.contains(token):
            raise GameStateError(f"Selected token refers to an unknown slot: {token}")
        if token is None and requirements.requires_token(piece.kind):
            raise GameStateError(
                f"Selected {piece.kind} on {origin} is token-gated but no token is bound to it."
            )
        return Selection(piece, origin, token)
