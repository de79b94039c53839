"""
Opponent Policy - Interface for non-networked opponent decisions.

A policy looks at the board and returns a decision for one sub-step:
- select_move: a legal move index for the given token
- select_break: a legal break index

The only contract is legality. Any strategy (random, heuristic, a human
at another keyboard) can sit behind it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random

from ..engine_core import rules
from ..engine_core.action import Action
from ..engine_core.board import Board


@dataclass
class BotDecision:
    """
    A decision made by a policy.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - How many candidates were considered
    """
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0

    @property
    def index(self) -> int:
        return self.action.index


class OpponentPolicy(ABC):
    """
    Abstract base class for opponent policies.

    Implementations must only ever return legal indices.
    """

    @abstractmethod
    def select_move(self, board: Board, is_p1: bool) -> BotDecision:
        """
        Select a move for the token of the given side.

        Args:
            board: Current board (must not be mutated)
            is_p1: True to move P1's token, False for P2's

        Returns:
            BotDecision holding a MOVE action
        """
        pass

    @abstractmethod
    def select_break(self, board: Board) -> BotDecision:
        """
        Select a cell to break.

        Args:
            board: Current board (must not be mutated)

        Returns:
            BotDecision holding a BREAK action
        """
        pass

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(OpponentPolicy):
    """
    Random policy - picks uniformly among legal moves and breaks.

    Pass a seed for reproducible games.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, board: Board, is_p1: bool) -> BotDecision:
        legal = rules.legal_move_indices(board, is_p1)
        if not legal:
            raise ValueError("No legal moves available")

        return BotDecision(
            action=Action.move(self.rng.choice(legal)),
            explanation="Selected randomly",
            evaluated_actions=len(legal),
        )

    def select_break(self, board: Board) -> BotDecision:
        legal = rules.legal_break_indices(board)
        if not legal:
            raise ValueError("No legal breaks available")

        return BotDecision(
            action=Action.break_cell(self.rng.choice(legal)),
            explanation="Selected randomly",
            evaluated_actions=len(legal),
        )


class FirstLegalPolicy(OpponentPolicy):
    """
    First-legal policy - always the lowest legal index.

    Used for deterministic tests.
    """

    def select_move(self, board: Board, is_p1: bool) -> BotDecision:
        legal = rules.legal_move_indices(board, is_p1)
        if not legal:
            raise ValueError("No legal moves available")

        return BotDecision(
            action=Action.move(legal[0]),
            explanation="Selected first legal move",
            evaluated_actions=1,
        )

    def select_break(self, board: Board) -> BotDecision:
        legal = rules.legal_break_indices(board)
        if not legal:
            raise ValueError("No legal breaks available")

        return BotDecision(
            action=Action.break_cell(legal[0]),
            explanation="Selected first legal break",
            evaluated_actions=1,
        )
