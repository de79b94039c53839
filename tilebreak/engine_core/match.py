"""
Match - The state machine that applies moves and breaks.

The match is the single point of board mutation. All state changes must
go through apply_move(), apply_break() or restart().

States:
    AWAITING_MOVE --move--> AWAITING_BREAK --break--> AWAITING_MOVE (other side)
    Any win check may end the match instead. OVER is terminal until restart().

Design principles:
- Validates before applying, using the pure predicates in rules.py
- Rejected input is a silent no-op: nothing changes, nothing is emitted
- Synchronous and delay-free; pacing belongs to the presentation layer
"""

from __future__ import annotations
import logging
from typing import Callable

from . import rules
from .action import Action, ActionType, ActionResult, RejectCode
from .board import Board, CellState, DEFAULT_SIZE
from .events import ListenerSet, MatchListener
from .state import (
    GameOverReason,
    MatchSnapshot,
    MatchStatus,
    Participant,
    Phase,
)

logger = logging.getLogger(__name__)


class Match:
    """
    One match between P1 and P2.

    Usage:
        match = Match(width=5, height=5)
        match.add_listener(presenter)

        match.apply_move(7)     # P1 moves
        match.apply_break(2)    # P1 breaks, P2 to act

        match.restart()
    """

    def __init__(
        self,
        width: int = DEFAULT_SIZE,
        height: int = DEFAULT_SIZE,
        listeners: list[MatchListener] | None = None,
    ):
        self.listeners = ListenerSet(listeners)
        self._restart_hooks: list[Callable[[], None]] = []
        self._width = width
        self._height = height
        self.action_history: list[Action] = []
        self._reset_state()

    def _reset_state(self):
        self._board = Board.start(self._width, self._height)
        self._phase = Phase.AWAITING_MOVE
        self._acting = Participant.P1
        self._status = MatchStatus.in_progress()
        self.action_history = []

    # --- wiring ---

    def add_listener(self, listener: MatchListener):
        self.listeners.add(listener)

    def remove_listener(self, listener: MatchListener):
        self.listeners.remove(listener)

    def add_restart_hook(self, hook: Callable[[], None]):
        """Register a callback run by restart() once the new match is in place."""
        self._restart_hooks.append(hook)

    # --- accessors ---

    @property
    def board(self) -> Board:
        return self._board

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def acting(self) -> Participant:
        return self._acting

    @property
    def status(self) -> MatchStatus:
        return self._status

    @property
    def is_over(self) -> bool:
        return self._status.is_over

    @property
    def winner(self) -> Participant | None:
        return self._status.winner

    @property
    def reason(self) -> GameOverReason | None:
        return self._status.reason

    def snapshot(self) -> MatchSnapshot:
        return MatchSnapshot.capture(self._board, self._phase, self._acting, self._status)

    # --- actions ---

    def apply(self, action: Action, actor: Participant | None = None) -> ActionResult:
        """
        Apply an action.

        If actor is given, the action is rejected unless actor is the
        acting participant.
        """
        validation_error = self._validate_action(action, actor)
        if validation_error:
            return validation_error

        handler = self._get_handler(action.action_type)
        result = handler(action)
        logger.debug("Applied %s: %s", action.action_type.value, "; ".join(result.changes))
        return result

    def apply_move(self, index: int, actor: Participant | None = None) -> ActionResult:
        return self.apply(Action.move(index), actor)

    def apply_break(self, index: int, actor: Participant | None = None) -> ActionResult:
        return self.apply(Action.break_cell(index), actor)

    def _validate_action(self, action: Action, actor: Participant | None) -> ActionResult | None:
        """
        Check the action against status, turn, phase and rules.

        Returns a failure result if invalid, None if valid.
        """
        if self.is_over:
            return ActionResult.failure("Match is over", RejectCode.GAME_OVER)

        if actor is not None and actor != self._acting:
            return ActionResult.failure(
                f"Not {actor.display_name}'s turn",
                RejectCode.NOT_YOUR_TURN,
            )

        expected = ActionType.MOVE if self._phase == Phase.AWAITING_MOVE else ActionType.BREAK
        if action.action_type != expected:
            return ActionResult.failure(
                f"Expected {expected.value}, got {action.action_type.value}",
                RejectCode.WRONG_PHASE,
            )

        if not rules.index_in_bounds(self._board, action.index):
            return ActionResult.failure(
                f"Cell {action.index} is off the board",
                RejectCode.OUT_OF_BOUNDS,
            )

        if action.action_type == ActionType.MOVE:
            if not rules.is_legal_move_for_current(self._board, self._acting.is_p1, action.index):
                return ActionResult.failure(
                    f"Cannot move to cell {action.index}",
                    RejectCode.ILLEGAL_MOVE,
                )
        elif not rules.is_legal_break_at_index(self._board, action.index):
            return ActionResult.failure(
                f"Cannot break cell {action.index}",
                RejectCode.ILLEGAL_BREAK,
            )

        return None

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.MOVE: self._handle_move,
            ActionType.BREAK: self._handle_break,
        }
        return handlers[action_type]

    def _handle_move(self, action: Action) -> ActionResult:
        mover = self._acting
        board = self._board
        dst = board.from_index(action.index)
        src = board.position_of(mover)

        board.set(src.x, src.y, CellState.EMPTY)
        board.set(dst.x, dst.y, mover.marker)
        if mover.is_p1:
            board.p1_pos = dst
        else:
            board.p2_pos = dst
        self.action_history.append(action)

        self.listeners.on_board_changed(self.snapshot())
        self.listeners.on_step_cue()

        changes = [f"{mover.display_name} moved to ({dst.x}, {dst.y})"]

        if not rules.opponent_has_move(board, mover.is_p1):
            self._end(mover, GameOverReason.OPPONENT_STUCK)
            return ActionResult.accepted(action, changes, game_over=True)

        self._phase = Phase.AWAITING_BREAK
        self.listeners.on_phase_changed(self._phase, self._acting)
        return ActionResult.accepted(action, changes)

    def _handle_break(self, action: Action) -> ActionResult:
        breaker = self._acting
        board = self._board
        pos = board.from_index(action.index)

        board.set(pos.x, pos.y, CellState.BROKEN)
        self.action_history.append(action)

        self.listeners.on_board_changed(self.snapshot())
        self.listeners.on_break_cue()

        changes = [f"{breaker.display_name} broke ({pos.x}, {pos.y})"]

        # A breaker standing next to the opponent is not self-trapped; the
        # opponent's own stuck check below decides that case.
        if (
            not board.are_adjacent(board.p1_pos, board.p2_pos)
            and not rules.has_any_legal_move(board, breaker.is_p1)
        ):
            self._end(breaker.other(), GameOverReason.SELF_TRAPPED)
            return ActionResult.accepted(action, changes, game_over=True)

        self._acting = breaker.other()
        self._phase = Phase.AWAITING_MOVE
        self.listeners.on_phase_changed(self._phase, self._acting)

        if not rules.has_any_legal_move(board, self._acting.is_p1):
            self._end(breaker, GameOverReason.OPPONENT_STUCK)
            return ActionResult.accepted(action, changes, game_over=True)

        return ActionResult.accepted(action, changes)

    def check_immediate_game_over(self) -> bool:
        """
        Start-of-turn stuck check for the acting participant.

        Ends the match (other side wins, OPPONENT_STUCK) and returns True
        if the acting participant cannot move.
        """
        if self.is_over:
            return True
        if not rules.has_any_legal_move(self._board, self._acting.is_p1):
            self._end(self._acting.other(), GameOverReason.OPPONENT_STUCK)
            return True
        return False

    def _end(self, winner: Participant, reason: GameOverReason):
        self._status = MatchStatus.over(winner, reason)
        logger.info("Game over: %s wins (%s)", winner.display_name, reason.value)
        self.listeners.on_game_over(winner, reason)
        self.listeners.on_game_over_cue()

    # --- lifecycle ---

    def restart(self):
        """
        Replace the board and reset phase, status and acting participant.

        The whole state is swapped before any hook or listener runs, so a
        half-reset match is never observable.
        """
        self._reset_state()
        logger.info("Match restarted on a %dx%d board", self._board.width, self._board.height)

        for hook in list(self._restart_hooks):
            hook()

        self.listeners.on_board_changed(self.snapshot())
        self.listeners.on_phase_changed(self._phase, self._acting)
