"""
The rules engine collaborator.

The token economy does not know how chess pieces move. Everything about standard chess
(legality, side to move, check / mate / stalemate) is asked of a RulesEngine.

Key idea: the token engine only depends on the narrow `RulesEngine` protocol.
`PythonChessRules` is the implementation used by the game, backed by the python-chess library.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Self

import chess

from token_chess.core.exceptions import InvalidFENError
from token_chess.core.shared_types import Color, PieceType, Status
from token_chess.rules.pieces import Piece
from token_chess.rules.square import Square

logger = logging.getLogger(__name__)

STARTING_FEN = chess.STARTING_FEN


@dataclass(frozen=True)
class MoveReport:
    """What happened on the board. Check / mate flags are for display, the token engine does not branch on them."""

    uci: str
    san: str
    is_capture: bool
    promotion: Optional[PieceType]
    is_check: bool
    is_checkmate: bool
    is_stalemate: bool


@dataclass(frozen=True)
class MoveResult:
    """
    Either the accepted move (with its report) or the reason it was refused.

    Illegal moves are an expected outcome of a player's click, so they are returned rather than raised.
    """

    report: Optional[MoveReport] = None
    reason: Optional[str] = None

    @classmethod
    def accepted(cls, report: MoveReport) -> Self:
        return cls(report=report)

    @classmethod
    def illegal(cls, reason: str) -> Self:
        return cls(reason=reason)

    @property
    def ok(self) -> bool:
        return self.report is not None


class RulesEngine(Protocol):
    """Just the parts of a chess implementation the token engine needs"""

    def turn_owner(self) -> Color: ...
    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def attempt_move(
        self, origin: Square, destination: Square, promotion: PieceType
    ) -> MoveResult: ...
    def legal_destinations(self, origin: Square) -> list[Square]: ...
    def fen(self) -> str: ...
    def status(self) -> Status: ...


# --- SQUARE / PIECE CONVERSION ---
def to_chess_square(square: Square) -> chess.Square:
    """python-chess numbers squares 0 (a1) to 63 (h8)"""
    return chess.square(square.file - 1, square.rank - 1)


def from_chess_square(index: chess.Square) -> Square:
    return Square(file=chess.square_file(index) + 1, rank=chess.square_rank(index) + 1)


def to_chess_piece_type(kind: PieceType) -> chess.PieceType:
    """chess.PIECE_NAMES = [None, 'pawn', 'knight', ...], so the index is the python-chess piece type"""
    return chess.PIECE_NAMES.index(kind.value)


@dataclass
class PythonChessRules:
    board: chess.Board

    @classmethod
    def from_fen(cls, fen: Optional[str] = None) -> Self:
        """Load a position. Without a FEN you get the standard starting position."""
        fen = fen or STARTING_FEN
        try:
            board = chess.Board(fen)
        except ValueError as error:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}") from error

        # python-chess happily loads positions it cannot play (no kings, pawns on the back rank, ...)
        if not board.is_valid():
            raise InvalidFENError(f"FEN does not describe a playable position: {fen}")
        return cls(board)

    def turn_owner(self) -> Color:
        return Color.WHITE if self.board.turn == chess.WHITE else Color.BLACK

    def piece_at(self, square: Square) -> Optional[Piece]:
        found = self.board.piece_at(to_chess_square(square))
        if found is None:
            return None
        return Piece.from_fen(found.symbol())

    def attempt_move(
        self, origin: Square, destination: Square, promotion: PieceType
    ) -> MoveResult:
        """
        Try to play origin -> destination.
        ----

        1. A pawn reaching the last rank is promoted to `promotion` (the only promotion the caller ever asks for)
        2. Refuse anything python-chess does not list as legal
        3. Describe the move (SAN is only available BEFORE pushing), then push it. This toggles the side to move.
        """
        move = self._build_move(origin, destination, promotion)
        if not self.board.is_legal(move):
            return MoveResult.illegal(
                f"Move not allowed: {origin.to_algebraic()}{destination.to_algebraic()}"
            )

        san = self.board.san(move)
        is_capture = self.board.is_capture(move)
        self.board.push(move)

        report = MoveReport(
            uci=move.uci(),
            san=san,
            is_capture=is_capture,
            promotion=promotion if move.promotion else None,
            is_check=self.board.is_check(),
            is_checkmate=self.board.is_checkmate(),
            is_stalemate=self.board.is_stalemate(),
        )
        logger.debug("Rules engine accepted %s", report.uci)
        return MoveResult.accepted(report)

    def legal_destinations(self, origin: Square) -> list[Square]:
        origin_index = to_chess_square(origin)
        destinations = {
            move.to_square
            for move in self.board.legal_moves
            if move.from_square == origin_index
        }
        return [from_chess_square(index) for index in sorted(destinations)]

    def fen(self) -> str:
        return self.board.fen()

    def status(self) -> Status:
        if self.board.is_checkmate():
            return Status.CHECKMATE
        if self.board.is_stalemate():
            return Status.STALEMATE
        if self.board.is_insufficient_material() or self.board.is_seventyfive_moves():
            return Status.DRAW
        if self.board.is_check():
            return Status.CHECK
        return Status.IN_PROGRESS

    # -- PRIVATE HELPERS ---
    def _build_move(
        self, origin: Square, destination: Square, promotion: PieceType
    ) -> chess.Move:
        from_index = to_chess_square(origin)
        to_index = to_chess_square(destination)
        if self._is_pawn_push_to_promotion_square(from_index, to_index):
            return chess.Move(
                from_index, to_index, promotion=to_chess_piece_type(promotion)
            )
        return chess.Move(from_index, to_index)

    def _is_pawn_push_to_promotion_square(
        self, from_index: chess.Square, to_index: chess.Square
    ) -> bool:
        """check if the move is a pawn move and if it reaches either the first or the final rank"""
        moving_piece = self.board.piece_at(from_index)
        is_pawn_move = moving_piece is not None and moving_piece.piece_type == chess.PAWN
        return is_pawn_move and chess.square_rank(to_index) in (0, 7)
