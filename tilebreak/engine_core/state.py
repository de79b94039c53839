"""
Match State - Enumerations and snapshots shared by the engine.

Design principles:
- Participants are fixed at two: P1 (blue) and P2 (red)
- A turn is a MOVE followed by a BREAK
- Snapshots are immutable copies handed to presentation and the API
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .board import CellState, Position

if TYPE_CHECKING:
    from .board import Board


class Participant(Enum):
    """The two logical players."""
    P1 = "p1"
    P2 = "p2"

    def other(self) -> Participant:
        return Participant.P2 if self is Participant.P1 else Participant.P1

    @property
    def is_p1(self) -> bool:
        return self is Participant.P1

    @property
    def marker(self) -> CellState:
        """Cell state holding this participant's token."""
        return CellState.P1 if self is Participant.P1 else CellState.P2

    @property
    def display_name(self) -> str:
        return "BLUE" if self is Participant.P1 else "RED"


class Phase(Enum):
    """Which action class is legal next for the acting participant."""
    AWAITING_MOVE = "awaiting_move"
    AWAITING_BREAK = "awaiting_break"


class GameOverReason(Enum):
    """Why a match ended."""
    OPPONENT_STUCK = "opponent_stuck"
    SELF_TRAPPED = "self_trapped"


@dataclass(frozen=True)
class MatchStatus:
    """
    IN_PROGRESS, or OVER with a winner and a reason.

    Use MatchStatus.in_progress() and MatchStatus.over(...) to build one.
    """
    winner: Participant | None = None
    reason: GameOverReason | None = None

    @classmethod
    def in_progress(cls) -> MatchStatus:
        return cls()

    @classmethod
    def over(cls, winner: Participant, reason: GameOverReason) -> MatchStatus:
        return cls(winner=winner, reason=reason)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def __str__(self):
        if not self.is_over:
            return "in_progress"
        return f"over({self.winner.display_name}, {self.reason.value})"


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Immutable copy of everything the presentation layer draws.

    cells is row-major: cells[y][x].
    """
    width: int
    height: int
    cells: tuple[tuple[CellState, ...], ...]
    p1_pos: Position
    p2_pos: Position
    phase: Phase
    acting: Participant
    status: MatchStatus

    @classmethod
    def capture(
        cls,
        board: Board,
        phase: Phase,
        acting: Participant,
        status: MatchStatus,
    ) -> MatchSnapshot:
        return cls(
            width=board.width,
            height=board.height,
            cells=board.rows(),
            p1_pos=board.p1_pos,
            p2_pos=board.p2_pos,
            phase=phase,
            acting=acting,
            status=status,
        )

    def cell(self, x: int, y: int) -> CellState:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return CellState.BROKEN
        return self.cells[y][x]

    def render(self) -> str:
        """Text rendering: '1' and '2' for tokens, '#' broken, '.' empty."""
        glyphs = {
            CellState.EMPTY: ".",
            CellState.P1: "1",
            CellState.P2: "2",
            CellState.BROKEN: "#",
        }
        return "\n".join(
            " ".join(glyphs[cell] for cell in row)
            for row in self.cells
        )
