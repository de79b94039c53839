"""
Turn Coordinator - Maps the transport's turn counter to a participant.

The transport hands out a monotonically increasing turn number and never
resets it. The coordinator keeps the participant order (designated
authority first, the rest ascending by id) and an offset:

    index = (turn - 1 + offset) mod n

After a restart the offset is recomputed on the next turn-begin so that
turn resolves to index 0, the authority. Only the mapping shifts; the
counter itself is untouched.
"""

from __future__ import annotations
import logging
from typing import Hashable

from ..engine_core.state import Participant

logger = logging.getLogger(__name__)


class TurnCoordinator:
    """
    Turn number -> participant resolution for one peer.

    Args:
        local_id: This peer's participant id
        participants: Connected participant ids
        authority: The designated authority's id (sequencer)
    """

    def __init__(
        self,
        local_id: Hashable,
        participants: list[Hashable] | None = None,
        authority: Hashable | None = None,
    ):
        self.local_id = local_id
        self.offset = 0
        self.pending_realign = False
        self._authority: Hashable | None = None
        self._order: list[Hashable] = []
        if participants:
            self.set_participants(participants, authority)

    # --- participant list ---

    @property
    def authority(self) -> Hashable | None:
        return self._authority

    @property
    def order(self) -> list[Hashable]:
        """Participant ids, authority first."""
        return list(self._order)

    @property
    def participant_count(self) -> int:
        return len(self._order)

    @property
    def is_authority(self) -> bool:
        return self._authority is not None and self.local_id == self._authority

    def set_participants(self, participants: list[Hashable], authority: Hashable | None = None):
        """
        Replace the participant list.

        If authority is None or not among the participants, the lowest id
        becomes the authority.
        """
        ids = sorted(set(participants))
        if authority is None or authority not in ids:
            authority = ids[0] if ids else None

        self._authority = authority
        self._order = [authority] + [pid for pid in ids if pid != authority] if ids else []
        logger.debug("Turn order set to %s", self._order)

    def add_participant(self, participant_id: Hashable):
        self.set_participants(self._order + [participant_id], self._authority)

    def remove_participant(self, participant_id: Hashable):
        authority = self._authority if participant_id != self._authority else None
        self.set_participants(
            [pid for pid in self._order if pid != participant_id],
            authority,
        )

    # --- turn resolution ---

    def expected_actor_for_turn(self, turn: int) -> Hashable | None:
        """Participant authorized to act on this turn, or None if nobody is connected."""
        if not self._order:
            return None
        index = (turn - 1 + self.offset) % len(self._order)
        return self._order[index]

    def request_realign(self):
        """Make the authority act on the next turn-begin, whatever its number."""
        self.pending_realign = True

    def on_turn_begins(self, turn: int) -> Hashable | None:
        """
        Resolve the acting participant for a new turn.

        Applies a pending realignment first.
        """
        n = len(self._order)
        if n == 0:
            logger.error("Turn %d began before the turn order was set", turn)
            return None

        if self.pending_realign:
            turn_mod = ((turn - 1) % n + n) % n
            self.offset = (n - turn_mod) % n
            self.pending_realign = False
            logger.info("Realigned turn order at turn %d: offset=%d", turn, self.offset)

        return self.expected_actor_for_turn(turn)

    def is_local_turn(self, turn: int) -> bool:
        actor = self.expected_actor_for_turn(turn)
        return actor is not None and actor == self.local_id

    # --- identities ---

    def participant_for(self, participant_id: Hashable) -> Participant | None:
        """P1 for the participant at index 0, P2 for anyone else listed."""
        if participant_id not in self._order:
            return None
        return Participant.P1 if self._order.index(participant_id) == 0 else Participant.P2

    def assign_local_identity(self) -> Participant | None:
        """
        Which logical player this peer controls.

        Recompute after every restart and every participant list change.
        """
        participant = self.participant_for(self.local_id)
        if participant is not None:
            logger.info(
                "Local participant %s plays %s", self.local_id, participant.display_name
            )
        return participant
