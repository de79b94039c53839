"""
Single Player Game - Human (P1, blue) against an opponent policy (P2, red).

The opponent's turn runs as three scheduled steps so the presentation
layer can pace it:

    move_delay -> move, move_delay -> break, break_delay -> done

Input is ignored while the opponent is busy. A restart bumps the match
generation so callbacks scheduled for the old match do nothing.
"""

from __future__ import annotations
import logging

from ..bots.policy import BotDecision, OpponentPolicy, RandomPolicy
from ..config import MatchConfig
from ..engine_core.action import ActionResult, RejectCode
from ..engine_core.events import MatchListener
from ..engine_core.match import Match
from ..engine_core.state import Participant, Phase
from .scheduler import ManualScheduler, Scheduler

logger = logging.getLogger(__name__)


class SinglePlayerGame:
    """
    Local match against an OpponentPolicy.

    Usage:
        game = SinglePlayerGame(policy=RandomPolicy(seed=1))
        game.on_cell_clicked(7)        # human move
        game.on_cell_clicked(2)        # human break, opponent scheduled
        game.scheduler.run_pending()   # opponent plays
    """

    human = Participant.P1
    opponent = Participant.P2

    def __init__(
        self,
        config: MatchConfig | None = None,
        policy: OpponentPolicy | None = None,
        scheduler: Scheduler | None = None,
        listeners: list[MatchListener] | None = None,
    ):
        self.config = config or MatchConfig()
        self.policy = policy or RandomPolicy()
        self.scheduler = scheduler or ManualScheduler()
        self.match = Match(self.config.width, self.config.height, listeners)
        self.opponent_busy = False
        self._generation = 0

    @property
    def listeners(self):
        return self.match.listeners

    # --- human input ---

    def on_cell_clicked(self, index: int) -> ActionResult:
        if self.match.is_over:
            return ActionResult.failure("Match is over", RejectCode.GAME_OVER)
        if self.opponent_busy or self.match.acting != self.human:
            return ActionResult.failure("Not your turn", RejectCode.NOT_YOUR_TURN)

        if self.match.phase == Phase.AWAITING_MOVE:
            return self.match.apply_move(index, actor=self.human)

        result = self.match.apply_break(index, actor=self.human)
        if result:
            self._try_start_opponent()
        return result

    # --- opponent ---

    def _try_start_opponent(self):
        if self.match.is_over or self.match.acting != self.opponent or self.opponent_busy:
            return
        self.opponent_busy = True
        self._schedule(self.config.opponent_move_delay, self._opponent_move)

    def _schedule(self, delay: float, step):
        generation = self._generation

        def run():
            if generation == self._generation:
                step()

        self.scheduler.schedule(delay, run)

    def _log_decision(self, decision: BotDecision):
        logger.debug(
            "%s picked %s %d out of %d: %s",
            self.policy.get_name(),
            decision.action.action_type.value,
            decision.index,
            decision.evaluated_actions,
            decision.explanation,
        )

    def _opponent_move(self):
        if self.match.check_immediate_game_over():
            self.opponent_busy = False
            return

        decision = self.policy.select_move(self.match.board, is_p1=False)
        self._log_decision(decision)
        result = self.match.apply(decision.action, actor=self.opponent)
        if not result:
            logger.error("Opponent policy %s chose an illegal move: %s", self.policy.get_name(), result.error)
        if not result or self.match.is_over:
            self.opponent_busy = False
            return

        self._schedule(self.config.opponent_move_delay, self._opponent_break)

    def _opponent_break(self):
        decision = self.policy.select_break(self.match.board)
        self._log_decision(decision)
        result = self.match.apply(decision.action, actor=self.opponent)
        if not result:
            logger.error("Opponent policy %s chose an illegal break: %s", self.policy.get_name(), result.error)
            self.opponent_busy = False
            return
        self._schedule(self.config.opponent_break_delay, self._opponent_done)

    def _opponent_done(self):
        self.opponent_busy = False

    # --- lifecycle ---

    def restart(self):
        """Fresh match; pending opponent steps from the old one are dropped."""
        self._generation += 1
        self.opponent_busy = False
        self.match.restart()

        if self.match.check_immediate_game_over():
            return
        self._try_start_opponent()
