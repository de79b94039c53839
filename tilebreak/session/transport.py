"""
Transport - The message layer between peers.

The core only needs a handful of operations from the transport:

    begin_turn()                            authority asks for the next turn-begin
    send_action(index, finished)            relay a move or a finishing break
    is_local_already_finished_this_turn()   guard against a second finishing action
    broadcast_restart()                     every peer restarts

and delivers four notifications back to each peer (TransportListener).

InMemoryRoom is a reference relay that wires peers together inside one
process. It behaves like a turn manager: a turn counter that only grows,
a per-turn finished set, and broadcast delivery in a single FIFO order.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable
import logging

from ..exceptions import NotAuthority, RoomFull

logger = logging.getLogger(__name__)


class TransportListener:
    """Notifications a transport delivers to a peer."""

    def attach(self, transport: Transport):
        """Called with this peer's transport handle before any delivery."""
        pass

    def on_turn_begins(self, turn: int):
        pass

    def on_remote_action(self, participant_id: Hashable, turn: int, index: int, finished: bool):
        pass

    def on_restart(self):
        pass

    def on_participants_changed(self, participants: list[Hashable], authority: Hashable | None):
        pass


class Transport(ABC):
    """
    Operations the core consumes from the transport.

    Implementations can relay in-process, over HTTP, or over any
    realtime service; the core never sees the wire format.
    """

    @property
    @abstractmethod
    def local_id(self) -> Hashable:
        """This peer's participant id."""
        pass

    @abstractmethod
    def begin_turn(self):
        """Ask for the next turn-begin notification. Authority only."""
        pass

    @abstractmethod
    def send_action(self, index: int, finished: bool) -> bool:
        """Relay an action. Returns False if the transport dropped it."""
        pass

    @abstractmethod
    def is_local_already_finished_this_turn(self) -> bool:
        pass

    @abstractmethod
    def broadcast_restart(self):
        pass


@dataclass
class RoomMessage:
    """One queued delivery."""
    kind: str
    args: tuple = ()


@dataclass
class InMemoryRoom:
    """
    In-process relay for up to max_participants peers.

    Participant ids are assigned 1, 2, 3... in join order. The first
    participant to join is the authority; if it leaves, the lowest
    remaining id takes over.

    Usage:
        room = InMemoryRoom()
        transport_a = room.join(peer_a)
        transport_b = room.join(peer_b)
        transport_a.begin_turn()
    """
    room_id: str = "local"
    max_participants: int = 2

    turn: int = 0
    authority: Hashable | None = None
    log: list[RoomMessage] = field(default_factory=list)

    _peers: dict[Hashable, TransportListener] = field(default_factory=dict)
    _finished: set = field(default_factory=set)
    _queue: deque = field(default_factory=deque)
    _dispatching: bool = False
    _next_id: int = 1

    @property
    def participants(self) -> list[Hashable]:
        return sorted(self._peers)

    @property
    def is_full(self) -> bool:
        return len(self._peers) >= self.max_participants

    def join(self, peer: TransportListener) -> RoomTransport:
        """Add a peer and return its transport handle."""
        if self.is_full:
            raise RoomFull(self.room_id)

        participant_id = self._next_id
        self._next_id += 1
        self._peers[participant_id] = peer
        if self.authority is None:
            self.authority = participant_id

        logger.info("Participant %s joined room %s", participant_id, self.room_id)
        transport = RoomTransport(self, participant_id)
        peer.attach(transport)
        self._post(RoomMessage("participants_changed", (self.participants, self.authority)))
        return transport

    def leave(self, participant_id: Hashable):
        if self._peers.pop(participant_id, None) is None:
            return
        self._finished.discard(participant_id)
        if participant_id == self.authority:
            self.authority = self.participants[0] if self._peers else None
        logger.info("Participant %s left room %s", participant_id, self.room_id)
        self._post(RoomMessage("participants_changed", (self.participants, self.authority)))

    # --- operations (called through RoomTransport) ---

    def begin_turn(self, caller: Hashable):
        if caller != self.authority:
            raise NotAuthority(f"Participant {caller} is not the room authority")
        self.turn += 1
        self._finished.clear()
        self._post(RoomMessage("turn_begins", (self.turn,)))

    def send_action(self, caller: Hashable, index: int, finished: bool) -> bool:
        if finished:
            if caller in self._finished:
                logger.debug("Dropped duplicate finishing action from %s", caller)
                return False
            self._finished.add(caller)
        self._post(RoomMessage("remote_action", (caller, self.turn, index, finished)))
        return True

    def is_finished(self, caller: Hashable) -> bool:
        return caller in self._finished

    def broadcast_restart(self):
        self._post(RoomMessage("restart"))

    # --- delivery ---

    def _post(self, message: RoomMessage):
        self.log.append(message)
        self._queue.append(message)
        if self._dispatching:
            return

        # Handlers may post more messages; they are drained after the
        # current one finishes, never delivered re-entrantly.
        self._dispatching = True
        try:
            while self._queue:
                self._deliver(self._queue.popleft())
        except Exception:
            # A failed delivery (e.g. a desync) leaves the room unusable.
            self._queue.clear()
            raise
        finally:
            self._dispatching = False

    def _deliver(self, message: RoomMessage):
        handlers: dict[str, Callable[[TransportListener], Any]] = {
            "turn_begins": lambda p: p.on_turn_begins(*message.args),
            "remote_action": lambda p: p.on_remote_action(*message.args),
            "restart": lambda p: p.on_restart(),
            "participants_changed": lambda p: p.on_participants_changed(*message.args),
        }
        handler = handlers[message.kind]
        for participant_id in self.participants:
            peer = self._peers.get(participant_id)
            if peer is not None:
                handler(peer)


class RoomTransport(Transport):
    """One peer's handle on an InMemoryRoom."""

    def __init__(self, room: InMemoryRoom, participant_id: Hashable):
        self.room = room
        self._local_id = participant_id

    @property
    def local_id(self) -> Hashable:
        return self._local_id

    def begin_turn(self):
        self.room.begin_turn(self._local_id)

    def send_action(self, index: int, finished: bool) -> bool:
        return self.room.send_action(self._local_id, index, finished)

    def is_local_already_finished_this_turn(self) -> bool:
        return self.room.is_finished(self._local_id)

    def broadcast_restart(self):
        self.room.broadcast_restart()

    def leave(self):
        self.room.leave(self._local_id)
