"""
The mandatory swap that follows every token-gated move.

The spent token is not consumed: it trades labels with a neutral token of the mover's choice.
This is the only way the kinds a player can pay with ever change.
"""

import logging
from dataclasses import dataclass

from token_chess.core.shared_types import Outcome, Owner
from token_chess.tokens.pool import TokenPools, TokenRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingSwap:
    """A token-gated move was played: `spending_owner` still owes the swap for `spent_token`."""

    spent_token: TokenRef
    spending_owner: Owner


def is_valid_swap_target(pools: TokenPools, chosen: TokenRef) -> bool:
    """Only a token currently sitting in the neutral pool can be swapped for."""
    return chosen.owner == Owner.NEUTRAL and pools.contains(chosen)


def perform_swap(pools: TokenPools, pending: PendingSwap, chosen: TokenRef) -> Outcome:
    """
    Swap the spent token with the chosen neutral token.
    ----

    Afterwards the spender holds whatever kind sat in the chosen neutral slot, and the neutral pool holds the kind
    that was just spent. The pools are left untouched when the target is refused.
    """
    if not is_valid_swap_target(pools, chosen):
        logger.debug("Refused swap target %s", chosen)
        return Outcome.INVALID_SWAP_TARGET

    spent_kind = pools.token(pending.spent_token).kind
    received_kind = pools.token(chosen).kind
    pools.swap(pending.spent_token, chosen)
    logger.info(
        "%s swapped a spent %s token for a neutral %s token",
        pending.spending_owner,
        spent_kind,
        received_kind,
    )
    return Outcome.SWAPPED
