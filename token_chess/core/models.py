"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, the API layer (higher) and domain/db layers (lower) use the model defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
OwnerName = str
KindName = str
SquareName = str


@dataclass
class GameModel:
    """Transport-safe representation of a token chess game used between API, Service, DB, and Game layers."""

    current_fen: str
    pools: dict[OwnerName, list[KindName]]
    required_types: list[KindName]
    turn_state: str
    status: str
    pending_swap_owner: Optional[OwnerName] = None
    pending_swap_slot: Optional[int] = None
    selected_square: Optional[SquareName] = None
    selected_token_slot: Optional[int] = None
    requirement_policy: str = field(default="union_all_pools")
