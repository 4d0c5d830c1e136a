"""Defines the chess pieces as the token engine sees them: who owns it and what kind it is."""

from dataclasses import dataclass
from typing import Self

from token_chess.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}


@dataclass(frozen=True)
class Piece:
    kind: PieceType
    owner: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        owner = Color.WHITE if character.isupper() else Color.BLACK
        kind = FEN_TO_PIECE[character.lower()]
        return cls(kind, owner)
