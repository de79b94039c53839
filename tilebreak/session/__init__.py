"""
Session Module - Turn synchronization and match controllers.

A session wires the engine to the outside world:
- TurnCoordinator maps the transport's turn counter to a participant
- NetworkedGame runs one peer of a two-peer match over a Transport
- SinglePlayerGame runs a local match against an opponent policy
- RoomManager hosts rooms for clients relaying through the API

Sessions are EPHEMERAL: nothing is persisted.
"""

from .turns import TurnCoordinator
from .transport import Transport, TransportListener, InMemoryRoom, RoomTransport
from .scheduler import Scheduler, ManualScheduler
from .networked import NetworkedGame
from .single_player import SinglePlayerGame
from .manager import RoomManager, HostedRoom, RoomEvent

__all__ = [
    "TurnCoordinator",
    "Transport",
    "TransportListener",
    "InMemoryRoom",
    "RoomTransport",
    "Scheduler",
    "ManualScheduler",
    "NetworkedGame",
    "SinglePlayerGame",
    "RoomManager",
    "HostedRoom",
    "RoomEvent",
]
