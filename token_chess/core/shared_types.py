"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self


class Status(StrEnum):
    """What the rules engine observes about the position. Reported only, never used to decide a turn."""

    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Owner(StrEnum):
    """Every token pool belongs to one of the players or to the neutral bank."""

    WHITE = "white"
    BLACK = "black"
    NEUTRAL = "neutral"

    @classmethod
    def of(cls, color: Color) -> Self:
        return cls(color.value)


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class TokenKind(StrEnum):
    """The closed set of labels a token can carry."""

    ROOK = "rook"
    KNIGHT = "knight"
    BISHOP = "bishop"
    QUEEN = "queen"


class TurnState(StrEnum):
    SELECT_PIECE = "select piece"
    SELECT_NEUTRAL_TOKEN = "select neutral token"


class RequirementPolicy(StrEnum):
    """Which pools contribute to the set of token-gated piece kinds."""

    UNION_ALL_POOLS = "union_all_pools"
    PLAYER_POOLS_ONLY = "player_pools_only"


class Outcome(StrEnum):
    """Tag of every result the Move Mediator hands back to the presentation layer."""

    # success
    SELECTED = "selected"
    DESELECTED = "deselected"
    MOVED = "moved"
    SWAPPED = "swapped"

    # rejections: expected, recoverable, never raised
    NOT_YOUR_TURN = "not your turn"
    EMPTY_SQUARE = "empty square"
    NO_TOKEN_AVAILABLE = "no token available"
    NO_ACTIVE_SELECTION = "no active selection"
    ILLEGAL_MOVE = "illegal move"
    NOT_AWAITING_SWAP = "not awaiting swap"
    INVALID_SWAP_TARGET = "invalid swap target"

    @property
    def ok(self) -> bool:
        return self in SUCCESSFUL_OUTCOMES


SUCCESSFUL_OUTCOMES = frozenset(
    {Outcome.SELECTED, Outcome.DESELECTED, Outcome.MOVED, Outcome.SWAPPED}
)
