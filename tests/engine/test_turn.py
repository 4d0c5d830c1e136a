"""Unit tests for token_chess/engine/turn.py"""

import pytest

from token_chess.core.exceptions import GameStateError
from token_chess.core.shared_types import Owner, TurnState
from token_chess.engine.turn import TurnStateMachine
from token_chess.tokens.pool import TokenRef
from token_chess.tokens.swap import PendingSwap

PENDING = PendingSwap(spent_token=TokenRef(Owner.BLACK, 1), spending_owner=Owner.BLACK)


def test_starts_in_select_piece() -> None:
    machine = TurnStateMachine()
    assert machine.state == TurnState.SELECT_PIECE
    assert machine.pending_swap is None
    assert not machine.awaiting_swap


def test_full_cycle() -> None:
    machine = TurnStateMachine()

    machine.begin_swap(PENDING)
    assert machine.state == TurnState.SELECT_NEUTRAL_TOKEN
    assert machine.pending_swap == PENDING

    completed = machine.complete_swap()
    assert completed == PENDING
    assert machine.state == TurnState.SELECT_PIECE
    assert machine.pending_swap is None


def test_state_follows_pending_swap() -> None:
    """SELECT_NEUTRAL_TOKEN if and only if a swap is pending, however the machine was built."""
    assert TurnStateMachine(PENDING).state == TurnState.SELECT_NEUTRAL_TOKEN
    assert TurnStateMachine(None).state == TurnState.SELECT_PIECE


def test_cannot_begin_second_swap() -> None:
    machine = TurnStateMachine(PENDING)
    other = PendingSwap(spent_token=TokenRef(Owner.WHITE, 0), spending_owner=Owner.WHITE)
    with pytest.raises(GameStateError):
        machine.begin_swap(other)
    assert machine.pending_swap == PENDING


def test_cannot_complete_without_pending_swap() -> None:
    with pytest.raises(GameStateError):
        TurnStateMachine().complete_swap()
