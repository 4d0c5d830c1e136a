"""Unit tests for token_chess/rules/engine.py (the python-chess backed rules engine)"""

import chess
import pytest

from token_chess.core.exceptions import InvalidFENError
from token_chess.core.shared_types import Color, PieceType, Status
from token_chess.rules.engine import (
    STARTING_FEN,
    PythonChessRules,
    from_chess_square,
    to_chess_piece_type,
    to_chess_square,
)
from token_chess.rules.pieces import Piece
from token_chess.rules.square import Square


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


# --- CONVERSIONS ---
def test_square_conversion() -> None:
    assert to_chess_square(sq("a1")) == chess.A1
    assert to_chess_square(sq("e4")) == chess.E4
    assert to_chess_square(sq("h8")) == chess.H8
    assert from_chess_square(chess.C6) == sq("c6")


@pytest.mark.parametrize(
    "kind, expected",
    [
        (PieceType.PAWN, chess.PAWN),
        (PieceType.KNIGHT, chess.KNIGHT),
        (PieceType.BISHOP, chess.BISHOP),
        (PieceType.ROOK, chess.ROOK),
        (PieceType.QUEEN, chess.QUEEN),
        (PieceType.KING, chess.KING),
    ],
)
def test_piece_type_conversion(kind: PieceType, expected: chess.PieceType) -> None:
    assert to_chess_piece_type(kind) == expected


# --- LOADING POSITIONS ---
def test_default_is_starting_position() -> None:
    rules = PythonChessRules.from_fen()
    assert rules.fen() == STARTING_FEN
    assert rules.turn_owner() == Color.WHITE
    assert rules.piece_at(sq("e1")) == Piece(PieceType.KING, Color.WHITE)
    assert rules.piece_at(sq("d8")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert rules.piece_at(sq("e4")) is None


@pytest.mark.parametrize(
    "fen",
    [
        "mock mock mock mock mock mock",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "8/8/8/8/8/8/8/8 w - - 0 1",
        "P3k3/8/8/8/8/8/8/4K3 w - - 0 1",
    ],
)
def test_invalid_fen(fen: str) -> None:
    """Unreadable FEN strings and unplayable positions (no kings, pawn on the back rank) are refused"""
    with pytest.raises(InvalidFENError):
        _ = PythonChessRules.from_fen(fen)


def test_black_to_move() -> None:
    rules = PythonChessRules.from_fen(
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
    )
    assert rules.turn_owner() == Color.BLACK


# --- MOVING ---
def test_legal_move_toggles_turn() -> None:
    rules = PythonChessRules.from_fen()
    result = rules.attempt_move(sq("e2"), sq("e4"), PieceType.QUEEN)

    assert result.ok
    assert result.reason is None
    assert result.report is not None
    assert result.report.uci == "e2e4"
    assert result.report.san == "e4"
    assert not result.report.is_capture
    assert result.report.promotion is None
    assert rules.turn_owner() == Color.BLACK
    assert rules.piece_at(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE)
    assert rules.piece_at(sq("e2")) is None


@pytest.mark.parametrize(
    "origin, destination",
    [
        ("e2", "e5"),  # too far
        ("b1", "d2"),  # own piece
        ("e7", "e5"),  # not your move
        ("e4", "e5"),  # nothing there
    ],
)
def test_illegal_moves_leave_board_alone(origin: str, destination: str) -> None:
    rules = PythonChessRules.from_fen()
    result = rules.attempt_move(sq(origin), sq(destination), PieceType.QUEEN)

    assert not result.ok
    assert result.report is None
    assert result.reason is not None
    assert f"{origin}{destination}" in result.reason
    assert rules.fen() == STARTING_FEN


def test_capture_is_reported() -> None:
    rules = PythonChessRules.from_fen(
        "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"
    )
    result = rules.attempt_move(sq("e4"), sq("d5"), PieceType.QUEEN)
    assert result.report is not None
    assert result.report.is_capture
    assert result.report.san == "exd5"


def test_en_passant() -> None:
    rules = PythonChessRules.from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
    result = rules.attempt_move(sq("e5"), sq("d6"), PieceType.QUEEN)

    assert result.report is not None
    assert result.report.is_capture
    assert rules.piece_at(sq("d5")) is None


def test_castling_is_a_king_move() -> None:
    rules = PythonChessRules.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    result = rules.attempt_move(sq("e1"), sq("g1"), PieceType.QUEEN)

    assert result.report is not None
    assert result.report.san == "O-O"
    assert rules.piece_at(sq("g1")) == Piece(PieceType.KING, Color.WHITE)
    assert rules.piece_at(sq("f1")) == Piece(PieceType.ROOK, Color.WHITE)


@pytest.mark.parametrize(
    "fen, origin, destination, color",
    [
        ("4k3/P7/8/8/8/8/8/4K3 w - - 0 1", "a7", "a8", Color.WHITE),
        ("4k3/8/8/8/8/8/p7/4K3 b - - 0 1", "a2", "a1", Color.BLACK),
    ],
)
def test_promotion(fen: str, origin: str, destination: str, color: Color) -> None:
    rules = PythonChessRules.from_fen(fen)
    result = rules.attempt_move(sq(origin), sq(destination), PieceType.QUEEN)

    assert result.report is not None
    assert result.report.promotion == PieceType.QUEEN
    assert result.report.is_check
    assert rules.piece_at(sq(destination)) == Piece(PieceType.QUEEN, color)


def test_rook_to_last_rank_is_not_a_promotion() -> None:
    rules = PythonChessRules.from_fen("4k3/8/8/8/8/8/8/4K2R w - - 0 1")
    result = rules.attempt_move(sq("h1"), sq("h8"), PieceType.QUEEN)

    assert result.report is not None
    assert result.report.promotion is None
    assert result.report.is_check
    assert rules.status() == Status.CHECK


# --- QUERIES ---
def test_legal_destinations() -> None:
    rules = PythonChessRules.from_fen()
    assert rules.legal_destinations(sq("g1")) == [sq("f3"), sq("h3")]
    assert rules.legal_destinations(sq("e2")) == [sq("e3"), sq("e4")]
    assert rules.legal_destinations(sq("e1")) == []
    assert rules.legal_destinations(sq("e4")) == []


def test_promotion_destination_listed_once() -> None:
    """python-chess lists one move per promotion piece, the caller only cares about the square"""
    rules = PythonChessRules.from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
    assert rules.legal_destinations(sq("a7")) == [sq("a8")]


@pytest.mark.parametrize(
    "fen, status",
    [
        (STARTING_FEN, Status.IN_PROGRESS),
        ("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3", Status.CHECKMATE),
        ("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1", Status.STALEMATE),
        ("4k3/8/8/8/8/8/8/4K3 w - - 0 1", Status.DRAW),
        ("4k3/8/8/8/8/8/8/4K2r w - - 0 1", Status.CHECK),
    ],
)
def test_status(fen: str, status: Status) -> None:
    assert PythonChessRules.from_fen(fen).status() == status
