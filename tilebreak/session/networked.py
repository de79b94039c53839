"""
Networked Game - One peer's controller for a two-peer match.

Each peer holds its own Match replica. Consistency comes from replicated
deterministic execution: every peer applies the same ordered actions,
each validated by the same rules, and so reaches the same board.

Flow for one turn:
1. Transport delivers on_turn_begins(turn)
2. TurnCoordinator resolves the acting participant
3. The acting peer applies a local move, relays (index, finished=False)
4. It applies a local break, relays (index, finished=True)
5. The other peer replays both through the same Match path
6. The authority sees the finished action and calls begin_turn()
"""

from __future__ import annotations
from typing import Hashable
import logging

from ..config import MatchConfig
from ..engine_core.action import Action, ActionResult, RejectCode
from ..engine_core.events import MatchListener
from ..engine_core.match import Match
from ..engine_core.state import Participant, Phase
from ..exceptions import DesyncError
from .transport import Transport, TransportListener
from .turns import TurnCoordinator

logger = logging.getLogger(__name__)

MATCH_PARTICIPANTS = 2


class NetworkedGame(TransportListener):
    """
    Composes Match, TurnCoordinator and a Transport for one peer.

    Usage:
        game = NetworkedGame(MatchConfig(), listeners=[presenter])
        room.join(game)            # transport calls game.attach()

        game.on_cell_clicked(7)    # local input
        game.request_restart()
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        listeners: list[MatchListener] | None = None,
        auto_start: bool = True,
    ):
        self.config = config or MatchConfig()
        self.match = Match(self.config.width, self.config.height, listeners)
        self.match.add_restart_hook(self._on_match_restarted)
        self.auto_start = auto_start

        self.transport: Transport | None = None
        self.turns: TurnCoordinator | None = None
        self.my_participant = Participant.P1
        self.is_my_turn = False
        self.current_turn = 0
        self.started = False

    @property
    def listeners(self):
        return self.match.listeners

    @property
    def local_id(self) -> Hashable | None:
        return self.transport.local_id if self.transport else None

    def attach(self, transport: Transport):
        self.transport = transport
        self.turns = TurnCoordinator(transport.local_id)

    # --- lifecycle ---

    def start(self):
        """Begin the first turn. Only the authority does anything here."""
        if self.started or not self.turns.is_authority:
            return
        self.started = True
        logger.info("Authority %s starting the match", self.local_id)
        self.transport.begin_turn()

    def request_restart(self):
        """Ask every peer, this one included, to restart."""
        self.transport.broadcast_restart()

    def _assign_identity(self):
        participant = self.turns.assign_local_identity()
        if participant is not None:
            self.my_participant = participant
            self.listeners.on_identity_assigned(participant)

    def _set_my_turn(self, value: bool):
        self.is_my_turn = value
        self.listeners.on_turn_changed(value)

    def _on_match_restarted(self):
        self.turns.request_realign()
        self._assign_identity()
        self._set_my_turn(False)

    # --- local input ---

    def on_cell_clicked(self, index: int) -> ActionResult:
        """
        Handle a click on a cell.

        Ignored unless the match is running, the transport says it is this
        peer's turn and the logical acting participant is ours.
        """
        if self.match.is_over:
            return ActionResult.failure("Match is over", RejectCode.GAME_OVER)
        if not self.is_my_turn or self.match.acting != self.my_participant:
            return ActionResult.failure("Not your turn", RejectCode.NOT_YOUR_TURN)

        if self.match.phase == Phase.AWAITING_MOVE:
            result = self.match.apply_move(index, actor=self.my_participant)
            if result:
                if result.game_over:
                    self._set_my_turn(False)
                self._send(index, finished=False)
            return result

        if self.transport.is_local_already_finished_this_turn():
            logger.debug("Already finished this turn, ignoring break on %d", index)
            return ActionResult.failure("Turn already finished", RejectCode.NOT_YOUR_TURN)

        result = self.match.apply_break(index, actor=self.my_participant)
        if result:
            self._set_my_turn(False)
            self._send(index, finished=True)
        return result

    def _send(self, index: int, finished: bool):
        if self.transport.send_action(index, finished):
            logger.debug("Sent action %d (finished=%s)", index, finished)

    # --- transport notifications ---

    def on_participants_changed(self, participants: list[Hashable], authority: Hashable | None):
        self.turns.set_participants(participants, authority)
        self._assign_identity()
        if len(participants) < MATCH_PARTICIPANTS:
            if self.started:
                logger.warning("Participant list shrank to %s during a match", participants)
                self._set_my_turn(False)
            return
        if self.started:
            # A refilled room starts over with the authority acting first
            if self.turns.is_authority:
                logger.info("Room refilled with %s, restarting the match", participants)
                self.request_restart()
            return
        if self.auto_start:
            self.start()

    def on_turn_begins(self, turn: int):
        self.current_turn = turn
        actor = self.turns.on_turn_begins(turn)
        if actor is None:
            return

        self.started = True
        expected = self.turns.participant_for(actor)
        if not self.match.is_over and expected != self.match.acting:
            logger.error(
                "Turn %d resolves to %s but the match expects %s to act",
                turn,
                expected.display_name,
                self.match.acting.display_name,
            )

        self._set_my_turn(actor == self.local_id and not self.match.is_over)
        logger.debug("Turn %d begins: actor=%s mine=%s", turn, actor, self.is_my_turn)

    def on_remote_action(self, participant_id: Hashable, turn: int, index: int, finished: bool):
        if participant_id != self.local_id:
            self._replay(participant_id, turn, index, finished)

        if finished and self.turns.is_authority:
            self.transport.begin_turn()

    def _replay(self, participant_id: Hashable, turn: int, index: int, finished: bool):
        expected_actor = self.turns.expected_actor_for_turn(turn)
        if expected_actor != participant_id:
            raise DesyncError(
                participant_id, turn, index, finished,
                reason=f"turn belongs to {expected_actor}",
            )

        actor = self.turns.participant_for(participant_id)
        result = self.match.apply(Action.from_wire(index, finished), actor=actor)
        if not result:
            logger.error(
                "Desync: action %d (finished=%s) from %s rejected: %s",
                index, finished, participant_id, result.error,
            )
            raise DesyncError(participant_id, turn, index, finished, reason=result.error)

        logger.debug("Replayed action %d (finished=%s) from %s", index, finished, participant_id)

    def on_restart(self):
        self.match.restart()
        if self.turns.is_authority:
            logger.info("Authority %s begins the first turn after restart", self.local_id)
            self.transport.begin_turn()
