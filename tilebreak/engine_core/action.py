"""
Action System - Actions and results.

An action is one sub-step of a turn:
1. MOVE the acting token to an adjacent empty cell
2. BREAK an empty cell

Every action carries a flat cell index and a `finished` flag. A move
leaves the turn open (finished=False), a break closes it (finished=True).
This pair is the whole cross-peer payload.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class ActionType(Enum):
    """Types of actions in a turn."""
    MOVE = "move"
    BREAK = "break"


class RejectCode(str, Enum):
    """Why an action was rejected. Rejections never change state."""
    GAME_OVER = "GAME_OVER"
    WRONG_PHASE = "WRONG_PHASE"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    ILLEGAL_BREAK = "ILLEGAL_BREAK"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"


@dataclass(frozen=True)
class Action:
    """
    A single move or break.

    Actions are:
    - Validated against the rules before application
    - Relayed to the remote peer as (index, finished)
    - Recorded in the match history once accepted
    """
    action_type: ActionType
    index: int

    @property
    def finished(self) -> bool:
        return self.action_type == ActionType.BREAK

    @classmethod
    def move(cls, index: int) -> Action:
        """Factory for move action."""
        return cls(action_type=ActionType.MOVE, index=index)

    @classmethod
    def break_cell(cls, index: int) -> Action:
        """Factory for break action."""
        return cls(action_type=ActionType.BREAK, index=index)

    @classmethod
    def from_wire(cls, index: int, finished: bool) -> Action:
        """Rebuild an action from its relayed (index, finished) pair."""
        return cls.break_cell(index) if finished else cls.move(index)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was accepted
    - The rejection reason (if not)
    - The accepted action and whether it ended the match
    """
    success: bool
    action: Action | None = None
    error: str | None = None
    error_code: RejectCode | None = None

    game_over: bool = False
    changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: RejectCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def accepted(
        cls,
        action: Action,
        changes: list[str] | None = None,
        game_over: bool = False,
    ) -> ActionResult:
        """Create a success result."""
        return cls(
            success=True,
            action=action,
            changes=changes or [],
            game_over=game_over,
        )

    def __bool__(self):
        return self.success
