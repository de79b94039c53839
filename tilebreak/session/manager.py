"""
Room Manager - Hosted rooms for clients that relay through a server.

LIFECYCLE:
1. A client opens a room (board size from MatchConfig)
2. Two participants join; the first to join is the designated authority
3. When the room is full the first turn begins
4. Clients submit (index, finished) actions and poll the event log
5. Any participant may restart; the authority then acts first
6. The room is closed explicitly or cleaned up when stale

The hosted room keeps its own Match replica and validates every action
with the same rules the peers run, so a desynchronized or malicious
client cannot push an illegal action to the other side. When a finishing
action is accepted the room begins the next turn, exactly as the
authority peer does over a realtime transport.

PERSISTENCE: none. Rooms and their event logs live in memory only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import threading
import time
import uuid

from ..config import MatchConfig
from ..engine_core.action import Action, ActionResult, RejectCode
from ..engine_core.match import Match
from ..exceptions import ParticipantNotFound, RoomFull, RoomNotFound
from .turns import TurnCoordinator

logger = logging.getLogger(__name__)


@dataclass
class RoomEvent:
    """One entry in a room's event log. Clients replay these in seq order."""
    seq: int
    kind: str
    turn: int = 0
    participant_id: int | None = None
    index: int | None = None
    finished: bool | None = None
    payload: dict[str, Any] = field(default_factory=dict)


class HostedRoom:
    """
    A room hosted by the server.

    All public methods take the room lock; FastAPI may call them from
    several worker threads.
    """

    def __init__(self, room_id: str, config: MatchConfig | None = None, max_participants: int = 2):
        self.room_id = room_id
        self.config = config or MatchConfig()
        self.max_participants = max_participants
        self.created_at = time.time()
        self.lock = threading.RLock()

        self.match = Match(self.config.width, self.config.height)
        self.turns = TurnCoordinator(local_id=None)
        self.match.add_restart_hook(self.turns.request_realign)

        self.names: dict[int, str] = {}
        self.turn = 0
        self.started = False
        self.events: list[RoomEvent] = []
        self._finished: set[int] = set()
        self._next_id = 1

    # --- participants ---

    @property
    def participants(self) -> list[int]:
        return self.turns.order

    @property
    def is_full(self) -> bool:
        return len(self.names) >= self.max_participants

    def join(self, name: str = "Player") -> int:
        with self.lock:
            if self.is_full:
                raise RoomFull(self.room_id)

            participant_id = self._next_id
            self._next_id += 1
            self.names[participant_id] = name
            self.turns.set_participants(list(self.names), self.turns.authority)
            logger.info("Participant %s (%s) joined room %s", participant_id, name, self.room_id)
            self._record_participants()

            if self.is_full and not self.started:
                # A refilled room starts over with the authority acting first
                if self.turn > 0:
                    self.match.restart()
                    self._record("restart")
                self.started = True
                self._begin_turn()
            return participant_id

    def leave(self, participant_id: int):
        with self.lock:
            self._require(participant_id)
            del self.names[participant_id]
            self._finished.discard(participant_id)
            authority = self.turns.authority if participant_id != self.turns.authority else None
            self.turns.set_participants(list(self.names), authority)
            self.started = False
            logger.info("Participant %s left room %s", participant_id, self.room_id)
            self._record_participants()

    def _require(self, participant_id: int):
        if participant_id not in self.names:
            raise ParticipantNotFound(participant_id)

    # --- turns and actions ---

    @property
    def acting_participant_id(self) -> int | None:
        if not self.started or self.match.is_over:
            return None
        return self.turns.expected_actor_for_turn(self.turn)

    def _begin_turn(self):
        self.turn += 1
        self._finished.clear()
        actor = self.turns.on_turn_begins(self.turn)
        self._record("turn_begins", participant_id=actor)

    def submit_action(self, participant_id: int, index: int, finished: bool) -> ActionResult:
        """
        Validate and apply an action, then relay it through the event log.

        Rejections leave the room untouched and are not logged as events.
        """
        with self.lock:
            self._require(participant_id)

            if not self.started or self.turns.expected_actor_for_turn(self.turn) != participant_id:
                return ActionResult.failure("Not your turn", RejectCode.NOT_YOUR_TURN)
            if finished and participant_id in self._finished:
                return ActionResult.failure("Turn already finished", RejectCode.NOT_YOUR_TURN)

            actor = self.turns.participant_for(participant_id)
            result = self.match.apply(Action.from_wire(index, finished), actor=actor)
            if not result:
                logger.debug(
                    "Room %s rejected action %d from %s: %s",
                    self.room_id, index, participant_id, result.error,
                )
                return result

            self._record(
                "action",
                participant_id=participant_id,
                index=index,
                finished=finished,
            )
            if result.game_over:
                self._record(
                    "game_over",
                    payload={
                        "winner": self.match.winner.value,
                        "reason": self.match.reason.value,
                    },
                )

            if finished:
                self._finished.add(participant_id)
                self._begin_turn()
            return result

    def restart(self, participant_id: int):
        """Restart for every participant. The authority acts first afterwards."""
        with self.lock:
            self._require(participant_id)
            self.match.restart()
            self._record("restart", participant_id=participant_id)
            if self.started:
                self._begin_turn()

    # --- event log ---

    def _record(self, kind: str, **kwargs) -> RoomEvent:
        event = RoomEvent(seq=len(self.events) + 1, kind=kind, turn=self.turn, **kwargs)
        self.events.append(event)
        return event

    def _record_participants(self):
        self._record(
            "participants_changed",
            payload={
                "participants": self.participants,
                "authority": self.turns.authority,
            },
        )

    def events_after(self, seq: int = 0) -> list[RoomEvent]:
        with self.lock:
            return [event for event in self.events if event.seq > seq]


class RoomManager:
    """
    Manages hosted rooms.

    Responsibilities:
    - Open rooms with a board configuration
    - Look rooms up by id
    - Close rooms and clean up stale ones

    No persistence - rooms are in-memory only.
    """

    def __init__(self):
        self._rooms: dict[str, HostedRoom] = {}
        self._lock = threading.Lock()

    def create_room(self, config: MatchConfig | None = None) -> HostedRoom:
        room_id = str(uuid.uuid4())
        room = HostedRoom(room_id, config)
        with self._lock:
            self._rooms[room_id] = room
        logger.info("Opened room %s (%dx%d)", room_id, room.match.board.width, room.match.board.height)
        return room

    def get_room(self, room_id: str) -> HostedRoom:
        with self._lock:
            room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def close_room(self, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.pop(room_id, None)
        if room is not None:
            logger.info("Closed room %s", room_id)
        return room is not None

    def room_ids(self) -> list[str]:
        with self._lock:
            return list(self._rooms)

    def cleanup_stale_rooms(self, max_age_seconds: int = 3600) -> int:
        """
        Close rooms older than max_age that are not mid-match.

        Called periodically to free memory.
        """
        current_time = time.time()
        with self._lock:
            stale = [
                room_id for room_id, room in self._rooms.items()
                if current_time - room.created_at > max_age_seconds
                and (not room.started or room.match.is_over)
            ]
        # close_room takes the lock itself
        for room_id in stale:
            self.close_room(room_id)
        return len(stale)
