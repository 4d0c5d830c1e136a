"""
Which piece kinds need a token to move, and which token pays for them.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self, assert_never

from token_chess.core.shared_types import (
    Owner,
    PieceType,
    RequirementPolicy,
    TokenKind,
)
from token_chess.tokens.pool import TokenPools, TokenRef

logger = logging.getLogger(__name__)


def token_kind_for(piece_type: PieceType) -> Optional[TokenKind]:
    """
    The token that pays for a move of this piece kind.

    Pawns and kings have no token kind at all, so they can never be token-gated.
    """
    match piece_type:
        case PieceType.ROOK:
            return TokenKind.ROOK
        case PieceType.KNIGHT:
            return TokenKind.KNIGHT
        case PieceType.BISHOP:
            return TokenKind.BISHOP
        case PieceType.QUEEN:
            return TokenKind.QUEEN
        case PieceType.PAWN | PieceType.KING:
            return None
        case _:
            assert_never(piece_type)


def piece_type_for(kind: TokenKind) -> PieceType:
    """Every token kind names exactly one piece kind"""
    match kind:
        case TokenKind.ROOK:
            return PieceType.ROOK
        case TokenKind.KNIGHT:
            return PieceType.KNIGHT
        case TokenKind.BISHOP:
            return PieceType.BISHOP
        case TokenKind.QUEEN:
            return PieceType.QUEEN
        case _:
            assert_never(kind)


def contributing_owners(policy: RequirementPolicy) -> tuple[Owner, ...]:
    if policy == RequirementPolicy.PLAYER_POOLS_ONLY:
        return (Owner.WHITE, Owner.BLACK)
    return (Owner.WHITE, Owner.BLACK, Owner.NEUTRAL)


@dataclass(frozen=True)
class RequirementResolver:
    """
    Holds the set of token-gated piece kinds.
    ----

    The set is computed ONCE when the game starts and stays fixed, even though swaps keep moving labels between pools.
    (A kind that is gated at the start stays gated, also when every token of that kind has ended up in a single pool.)
    """

    required_types: frozenset[PieceType]

    @classmethod
    def at_game_start(
        cls,
        pools: TokenPools,
        policy: RequirementPolicy = RequirementPolicy.UNION_ALL_POOLS,
    ) -> Self:
        """
        Union of the kinds present in the pools that count for the policy.

        NOTE: with the default policy a kind that only sits in the neutral pool is gated, while no player starts with
        a matching token for it. That is how the game has always behaved, so it is kept, but made loud.
        """
        required = frozenset(
            piece_type_for(kind)
            for owner in contributing_owners(policy)
            for kind in pools.kinds(owner)
        )
        resolver = cls(required)

        unreachable = resolver.neutral_only_types(pools)
        if unreachable:
            logger.warning(
                "Piece kind(s) %s require a token but start only in the neutral pool: "
                "nobody can move them until a swap hands a player a matching token",
                ", ".join(sorted(unreachable)),
            )
        return resolver

    @classmethod
    def from_names(cls, names: list[str]) -> Self:
        return cls(frozenset(PieceType(name) for name in names))

    def to_names(self) -> list[str]:
        return sorted(piece_type.value for piece_type in self.required_types)

    def requires_token(self, piece_type: PieceType) -> bool:
        return piece_type in self.required_types

    def find_matching_token(
        self, pools: TokenPools, owner: Owner, piece_type: PieceType
    ) -> Optional[TokenRef]:
        """First slot (in pool order) of `owner`'s pool holding a token for this piece kind, if any."""
        wanted = token_kind_for(piece_type)
        if wanted is None:
            return None

        for slot, token in enumerate(pools.get(owner)):
            if token.kind == wanted:
                return TokenRef(owner, slot)
        return None

    def neutral_only_types(self, pools: TokenPools) -> set[PieceType]:
        """Gated kinds that neither player holds a token for."""
        held_by_players = {
            piece_type_for(kind)
            for owner in (Owner.WHITE, Owner.BLACK)
            for kind in pools.kinds(owner)
        }
        return {
            piece_type
            for piece_type in self.required_types
            if piece_type not in held_by_players
        }
