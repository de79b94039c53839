"""
Engine Core - Deterministic board model, rules and match state machine.

The engine is the runtime that:
1. Holds the Board (cells + token positions)
2. Validates moves and breaks with pure rule predicates
3. Applies accepted actions via the Match state machine
4. Evaluates win conditions after every action
5. Notifies presentation listeners
"""

from .board import Board, CellState, Position
from .state import Participant, Phase, GameOverReason, MatchStatus, MatchSnapshot
from .action import Action, ActionType, ActionResult, RejectCode
from .events import MatchListener, ListenerSet, RecordingListener
from .match import Match
from . import rules

__all__ = [
    "Board",
    "CellState",
    "Position",
    "Participant",
    "Phase",
    "GameOverReason",
    "MatchStatus",
    "MatchSnapshot",
    "Action",
    "ActionType",
    "ActionResult",
    "RejectCode",
    "MatchListener",
    "ListenerSet",
    "RecordingListener",
    "Match",
    "rules",
]
