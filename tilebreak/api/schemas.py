"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the room host.
The action payload is the protocol's (cell index, finished) pair.

Error Codes:
- ROOM_NOT_FOUND: Room does not exist or was closed
- ROOM_FULL: Room already holds two participants
- PARTICIPANT_NOT_FOUND: Participant id is not in the room
- NOT_YOUR_TURN: Participant is not authorized to act on this turn
- ILLEGAL_ACTION: Move or break rejected by the rules (ActionResponse only)
- VALIDATION_ERROR: Malformed request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class RoomStatus(str, Enum):
    """Room status values."""
    WAITING = "waiting"  # fewer than two participants
    PLAYING = "playing"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EventKind(str, Enum):
    """Kinds of room events clients replay."""
    PARTICIPANTS_CHANGED = "participants_changed"
    TURN_BEGINS = "turn_begins"
    ACTION = "action"
    RESTART = "restart"
    GAME_OVER = "game_over"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    x: int
    y: int

    model_config = {"from_attributes": True}


class ParticipantInfo(BaseModel):
    """A connected participant."""
    participant_id: int
    name: str
    side: Optional[str] = Field(None, description="p1 (blue) or p2 (red)")
    is_authority: bool = False


class BoardInfo(BaseModel):
    """Board snapshot. cells is row-major: cells[y][x]."""
    width: int
    height: int
    cells: list[list[str]] = Field(description="empty, p1, p2 or broken")
    p1_pos: PositionInfo
    p2_pos: PositionInfo


class EventInfo(BaseModel):
    """One entry of the room event log."""
    seq: int = Field(..., description="Monotonic sequence number within the room")
    kind: EventKind
    turn: int = 0
    participant_id: Optional[int] = None
    index: Optional[int] = None
    finished: Optional[bool] = None
    payload: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateRoomRequest(BaseModel):
    """Request to open a room."""
    width: int = Field(5, description="Board width; values below 3 are clamped to 3")
    height: int = Field(5, description="Board height; values below 3 are clamped to 3")


class JoinRoomRequest(BaseModel):
    name: str = Field("Player", max_length=64)


class ActionRequest(BaseModel):
    """
    A move (finished=false) or a break (finished=true).

    The server replays it through the same rules every peer uses.
    """
    participant_id: int
    index: int = Field(..., ge=0, description="Flat cell index: y * width + x")
    finished: bool = False


class RestartRequest(BaseModel):
    participant_id: int


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class RoomResponse(BaseModel):
    """Complete room state for display."""
    room_id: str
    status: RoomStatus
    turn: int = 0
    phase: str
    acting_side: str
    acting_participant_id: Optional[int] = None
    participants: list[ParticipantInfo] = Field(default_factory=list)
    board: BoardInfo
    winner: Optional[str] = None
    game_over_reason: Optional[str] = None
    created_at: float = 0.0
    api_version: str = "v1"


class JoinRoomResponse(BaseModel):
    room_id: str
    participant: ParticipantInfo
    room: RoomResponse


class ActionResponse(BaseModel):
    """Result of submitting an action."""
    accepted: bool
    finished: bool
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = Field(None, description="NOT_YOUR_TURN or ILLEGAL_ACTION when rejected")
    reject_code: Optional[str] = Field(None, description="Engine rejection reason, e.g. ILLEGAL_MOVE")
    game_over: bool = False
    room: RoomResponse


class EventsResponse(BaseModel):
    room_id: str
    events: list[EventInfo]
    last_seq: int = 0


class CloseRoomResponse(BaseModel):
    success: bool
    room_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
