"""
The token pools: one ordered row of tokens for white, one for black and one for the neutral bank.

Tokens are never created or destroyed once the game has started. A swap only exchanges the labels of two slots,
so the number of tokens per pool (and the multiset of labels over all pools) never changes.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Self

from token_chess.core.exceptions import InvalidPoolError
from token_chess.core.shared_types import Owner, TokenKind


@dataclass(eq=False)
class Token:
    """A labelled counter. Only its slot identifies it, so equality is identity."""

    kind: TokenKind


@dataclass(frozen=True)
class TokenRef:
    """Address of a single slot: whose pool, and where in that pool."""

    owner: Owner
    slot: int


class TokenPools:
    """All three pools of a game."""

    def __init__(self, pools: Mapping[str, Sequence[str]]) -> None:
        """Accepts Owner/TokenKind members or their plain string values (as stored in a GameModel)."""
        missing = [owner.value for owner in Owner if owner not in pools]
        if missing:
            raise InvalidPoolError(
                f"Token pools must be supplied for every owner. Missing: {', '.join(missing)}"
            )
        unknown = [str(owner) for owner in pools if owner not in set(Owner)]
        if unknown:
            raise InvalidPoolError(f"Unknown pool owner(s): {', '.join(unknown)}")

        # copy the kinds into fresh tokens: never alias the caller's lists
        try:
            self._pools: dict[Owner, list[Token]] = {
                owner: [Token(TokenKind(kind)) for kind in pools[owner]]
                for owner in Owner
            }
        except ValueError as error:
            raise InvalidPoolError(
                f"Tokens can only be one of {', '.join(TokenKind)}. Got: {dict(pools)}"
            ) from error

    @classmethod
    def from_kinds(
        cls,
        white: Sequence[TokenKind],
        black: Sequence[TokenKind],
        neutral: Sequence[TokenKind],
    ) -> Self:
        """Convenience constructor that reads well in tests and presets"""
        return cls({Owner.WHITE: white, Owner.BLACK: black, Owner.NEUTRAL: neutral})

    def to_names(self) -> dict[str, list[str]]:
        return {owner.value: [kind.value for kind in self.kinds(owner)] for owner in Owner}

    def get(self, owner: Owner) -> tuple[Token, ...]:
        """The tokens of a pool in slot order. A tuple: the pool itself cannot be resized from outside."""
        return tuple(self._pools[owner])

    def kinds(self, owner: Owner) -> list[TokenKind]:
        return [token.kind for token in self._pools[owner]]

    def contains(self, ref: TokenRef) -> bool:
        return 0 <= ref.slot < len(self._pools[ref.owner])

    def token(self, ref: TokenRef) -> Token:
        if not self.contains(ref):
            raise IndexError(f"No token in slot {ref.slot} of the {ref.owner} pool")
        return self._pools[ref.owner][ref.slot]

    def swap(self, first: TokenRef, second: TokenRef) -> None:
        """Exchange the labels of two slots (in the same or in different pools). Slots themselves stay put."""
        token_a = self.token(first)
        token_b = self.token(second)
        token_a.kind, token_b.kind = token_b.kind, token_a.kind

    def size(self) -> int:
        """Total amount of tokens over all pools"""
        return sum(len(tokens) for tokens in self._pools.values())

    def kind_counts(self) -> Counter[TokenKind]:
        """Multiset of labels over all pools"""
        return Counter(token.kind for tokens in self._pools.values() for token in tokens)
