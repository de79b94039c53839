"""
Bots module - Opponent policies for non-networked play.

Provides:
- OpponentPolicy: Interface for opponent decisions
- RandomPolicy: Uniform choice among legal actions
- FirstLegalPolicy: Deterministic lowest-index choice
"""

from .policy import OpponentPolicy, BotDecision, RandomPolicy, FirstLegalPolicy

__all__ = [
    "OpponentPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
]
