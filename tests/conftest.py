"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from token_chess.core.shared_types import Color, Owner, PieceType, Status, TokenKind
from token_chess.db.schema import Base
from token_chess.rules.engine import MoveReport, MoveResult
from token_chess.rules.pieces import Piece
from token_chess.rules.square import Square
from token_chess.tokens.pool import TokenPools

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Pools used throughout the tests: both players hold one token of each minor piece and a rook. The bank holds a queen.
STANDARD_WHITE = [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP]
STANDARD_BLACK = [TokenKind.ROOK, TokenKind.KNIGHT, TokenKind.BISHOP]
STANDARD_NEUTRAL = [TokenKind.ROOK, TokenKind.ROOK, TokenKind.QUEEN]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def standard_pools() -> TokenPools:
    return TokenPools(
        {
            Owner.WHITE: STANDARD_WHITE,
            Owner.BLACK: STANDARD_BLACK,
            Owner.NEUTRAL: STANDARD_NEUTRAL,
        }
    )


class ScriptedRules:
    """
    Stand-in for the rules engine: a dictionary board where every move is legal unless listed as illegal.

    Lets the token engine be tested without caring about chess geometry.
    """

    def __init__(
        self,
        position: dict[str, str],
        turn: Color = Color.WHITE,
        illegal: Optional[set[tuple[str, str]]] = None,
    ) -> None:
        self.position = {
            Square.from_algebraic(sq): Piece.from_fen(char) for sq, char in position.items()
        }
        self.turn = turn
        self.illegal = illegal or set()
        self.attempts: list[tuple[Square, Square, PieceType]] = []

    def turn_owner(self) -> Color:
        return self.turn

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def attempt_move(
        self, origin: Square, destination: Square, promotion: PieceType
    ) -> MoveResult:
        self.attempts.append((origin, destination, promotion))
        if (origin.to_algebraic(), destination.to_algebraic()) in self.illegal:
            return MoveResult.illegal("scripted as illegal")

        self.position[destination] = self.position.pop(origin)
        self.turn = Color.BLACK if self.turn == Color.WHITE else Color.WHITE
        uci = f"{origin}{destination}"
        return MoveResult.accepted(
            MoveReport(
                uci=uci,
                san=uci,
                is_capture=False,
                promotion=None,
                is_check=False,
                is_checkmate=False,
                is_stalemate=False,
            )
        )

    def legal_destinations(self, origin: Square) -> list[Square]:
        return []

    def fen(self) -> str:
        return "scripted"

    def status(self) -> Status:
        return Status.IN_PROGRESS


@pytest.fixture
def scripted_rules() -> type[ScriptedRules]:
    """Hands out the class so a test can set up the exact position it needs."""
    return ScriptedRules
