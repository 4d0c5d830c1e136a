"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    current_fen: Mapped[str]
    pools: Mapped[dict[str, list[str]]] = mapped_column(JSON)
    required_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    requirement_policy: Mapped[str]
    turn_state: Mapped[str]
    status: Mapped[str]
    pending_swap_owner: Mapped[Optional[str]]
    pending_swap_slot: Mapped[Optional[int]]
    selected_square: Mapped[Optional[str]]
    selected_token_slot: Mapped[Optional[int]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
