"""
Pytest fixtures for Tilebreak tests.
"""

import pytest

from ..engine_core.board import Board, CellState, Position
from ..engine_core.events import RecordingListener
from ..engine_core.match import Match
from ..engine_core.state import Participant
from ..session.networked import NetworkedGame
from ..session.transport import InMemoryRoom


def place(board: Board, participant: Participant, x: int, y: int):
    """Move a token directly, bypassing the rules. Test setup only."""
    old = board.p1_pos if participant.is_p1 else board.p2_pos
    board.set(old.x, old.y, CellState.EMPTY)
    board.set(x, y, participant.marker)
    if participant.is_p1:
        board.p1_pos = Position(x, y)
    else:
        board.p2_pos = Position(x, y)


def break_cells(board: Board, *cells):
    for x, y in cells:
        board.set(x, y, CellState.BROKEN)


@pytest.fixture
def board() -> Board:
    """5x5 board in the starting layout."""
    return Board.start(5, 5)


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def match(recorder) -> Match:
    """5x5 match with a recording listener attached."""
    return Match(5, 5, listeners=[recorder])


@pytest.fixture
def small_match(recorder) -> Match:
    """3x3 match with a recording listener attached."""
    return Match(3, 3, listeners=[recorder])


@pytest.fixture
def room() -> InMemoryRoom:
    return InMemoryRoom(room_id="test")


@pytest.fixture
def peers(room):
    """Two networked peers joined to the same room. The first one is the authority."""
    alice = NetworkedGame()
    bob = NetworkedGame()
    room.join(alice)
    room.join(bob)
    return alice, bob
