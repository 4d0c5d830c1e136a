"""
Two-state controller of a player's turn.

SELECT_PIECE ---(token-gated move)---> SELECT_NEUTRAL_TOKEN ---(neutral token chosen)---> SELECT_PIECE

A move of a piece that is not token-gated keeps the machine in SELECT_PIECE
(the rules engine has already handed the move to the opponent).
"""

from dataclasses import dataclass
from typing import Optional

from token_chess.core.exceptions import GameStateError
from token_chess.core.shared_types import TurnState
from token_chess.tokens.swap import PendingSwap


@dataclass
class TurnStateMachine:
    """
    The state is derived from the pending swap, not stored next to it.

    So SELECT_NEUTRAL_TOKEN is active if and only if a PendingSwap exists.
    """

    pending_swap: Optional[PendingSwap] = None

    @property
    def state(self) -> TurnState:
        if self.pending_swap is None:
            return TurnState.SELECT_PIECE
        return TurnState.SELECT_NEUTRAL_TOKEN

    @property
    def awaiting_swap(self) -> bool:
        return self.state == TurnState.SELECT_NEUTRAL_TOKEN

    def begin_swap(self, pending: PendingSwap) -> None:
        """A token-gated move succeeded: the mover now owes a swap before the opponent may act."""
        if self.awaiting_swap:
            raise GameStateError(
                f"Cannot start a new swap while {self.pending_swap} is still pending."
            )
        self.pending_swap = pending

    def complete_swap(self) -> PendingSwap:
        """The owed swap was made. Hands back the record that was cleared."""
        if self.pending_swap is None:
            raise GameStateError("No swap is pending.")
        completed = self.pending_swap
        self.pending_swap = None
        return completed
