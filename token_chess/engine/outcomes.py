"""Results handed back by the Move Mediator: success or one of the rejection signals, never an exception."""

from dataclasses import dataclass
from typing import Optional, Self

from token_chess.core.shared_types import Outcome
from token_chess.rules.engine import MoveReport


@dataclass(frozen=True)
class ActionResult:
    outcome: Outcome
    move: Optional[MoveReport] = None
    detail: Optional[str] = None

    @classmethod
    def rejected(cls, outcome: Outcome, detail: str) -> Self:
        return cls(outcome, detail=detail)

    @property
    def ok(self) -> bool:
        return self.outcome.ok
