"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from token_chess.core.exceptions import InvalidRequestError
from token_chess.core.shared_types import (
    Color,
    Outcome,
    Owner,
    RequirementPolicy,
    Status,
    TokenKind,
    TurnState,
)
from token_chess.rules.square import is_valid_square

OwnerName = str
KindName = str
SquareName = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None
    preset: Optional[str] = None
    pools: Optional[dict[Owner, list[TokenKind]]] = None
    requirement_policy: Optional[RequirementPolicy] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value

    @field_validator("pools")
    @classmethod
    def validate_pools(
        cls, value: Optional[dict[Owner, list[TokenKind]]]
    ) -> Optional[dict[Owner, list[TokenKind]]]:
        if value is None:
            return value

        missing = [owner.value for owner in Owner if owner not in value]
        if missing:
            raise InvalidRequestError(
                f"Pools must be given for every owner. Missing: {', '.join(missing)}"
            )
        return value


def _validate_square_name(value: str) -> str:
    if not is_valid_square(value):
        raise InvalidRequestError(
            f"Cannot interpret square: {value!r} as a valid square name."
        )
    return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class SelectPieceRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    to_square: str

    @field_validator("to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class SelectNeutralTokenRequest(BaseModel):
    """Neutral tokens are addressed by their slot in the neutral pool."""

    game_id: UUID
    slot: int


class ClickSquareRequest(BaseModel):
    """Board click in screen coordinates: row 0 is rank 8, col 0 is the a-file."""

    game_id: UUID
    row: int
    col: int

    @field_validator("row", "col")
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value <= 7:
            raise InvalidRequestError(f"Board coordinate {value} outside 0-7.")
        return value


class LegalDestinationsRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class SelectionView(BaseModel):
    square: SquareName
    piece: KindName
    owner: Color
    token_slot: Optional[int]


class PendingSwapView(BaseModel):
    spending_owner: Owner
    spent_slot: int


class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    turn_owner: Color
    turn_state: TurnState
    status: Status
    pools: dict[OwnerName, list[KindName]]
    required_types: list[KindName]
    selection: Optional[SelectionView]
    pending_swap: Optional[PendingSwapView]


class MoveView(BaseModel):
    uci: str
    san: str
    is_capture: bool
    is_check: bool
    is_checkmate: bool
    is_stalemate: bool


class ActionResponse(BaseModel):
    game_id: UUID
    outcome: Outcome
    ok: bool
    detail: Optional[str]
    move: Optional[MoveView]
    game: GameResponse


class LegalDestinationsResponse(BaseModel):
    game_id: UUID
    square: Optional[SquareName]
    destinations: list[SquareName]
