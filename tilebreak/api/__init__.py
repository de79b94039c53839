"""
API Module - HTTP interface for hosted rooms.

Clients:
1. Open a room and join it (two participants)
2. Submit moves and breaks for their turn
3. Poll the event log and replay it on their own board
4. Restart the match when it is over

All state is room-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateRoomRequest,
    JoinRoomRequest,
    ActionRequest,
    RestartRequest,
    # Responses
    RoomResponse,
    JoinRoomResponse,
    ActionResponse,
    EventsResponse,
    CloseRoomResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    ParticipantInfo,
    BoardInfo,
    EventInfo,
    ErrorCode,
    RoomStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateRoomRequest",
    "JoinRoomRequest",
    "ActionRequest",
    "RestartRequest",
    # Responses
    "RoomResponse",
    "JoinRoomResponse",
    "ActionResponse",
    "EventsResponse",
    "CloseRoomResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "ParticipantInfo",
    "BoardInfo",
    "EventInfo",
    "ErrorCode",
    "RoomStatus",
    # Service
    "APIService",
    "create_app",
]
