"""
API Service - Business logic layer between the HTTP API and hosted rooms.

The service:
1. Translates API requests to room calls
2. Formats room state as response schemas
3. Lets TileBreakError subclasses propagate for the app to map

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..config import MatchConfig
from ..engine_core.action import ActionResult, RejectCode
from ..engine_core.state import MatchSnapshot
from ..session.manager import HostedRoom, RoomEvent, RoomManager
from .schemas import (
    ActionRequest,
    ActionResponse,
    BoardInfo,
    CloseRoomResponse,
    CreateRoomRequest,
    ErrorCode,
    EventInfo,
    EventsResponse,
    JoinRoomRequest,
    JoinRoomResponse,
    ParticipantInfo,
    PositionInfo,
    RestartRequest,
    RoomResponse,
    RoomStatus,
)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        room = service.create_room(CreateRoomRequest(width=5, height=5))
        alice = service.join_room(room.room_id, JoinRoomRequest(name="alice"))
        service.submit_action(room.room_id, ActionRequest(
            participant_id=alice.participant.participant_id, index=7,
        ))
    """
    room_manager: RoomManager = field(default_factory=RoomManager)

    def create_room(self, request: CreateRoomRequest) -> RoomResponse:
        config = MatchConfig(width=request.width, height=request.height)
        room = self.room_manager.create_room(config)
        return self._room_to_response(room)

    def get_room(self, room_id: str) -> RoomResponse:
        return self._room_to_response(self.room_manager.get_room(room_id))

    def close_room(self, room_id: str) -> CloseRoomResponse:
        success = self.room_manager.close_room(room_id)
        return CloseRoomResponse(success=success, room_id=room_id)

    def join_room(self, room_id: str, request: JoinRoomRequest) -> JoinRoomResponse:
        room = self.room_manager.get_room(room_id)
        participant_id = room.join(request.name)
        return JoinRoomResponse(
            room_id=room_id,
            participant=self._participant_info(room, participant_id),
            room=self._room_to_response(room),
        )

    def leave_room(self, room_id: str, participant_id: int) -> RoomResponse:
        room = self.room_manager.get_room(room_id)
        room.leave(participant_id)
        return self._room_to_response(room)

    def submit_action(self, room_id: str, request: ActionRequest) -> ActionResponse:
        """
        Submit a move or a break.

        Rule rejections come back as accepted=false with a reject_code;
        they are not errors at the HTTP level.
        """
        room = self.room_manager.get_room(room_id)
        result = room.submit_action(request.participant_id, request.index, request.finished)
        return ActionResponse(
            accepted=result.success,
            finished=request.finished,
            error=result.error,
            error_code=self._error_code(result),
            reject_code=result.error_code.value if result.error_code else None,
            game_over=result.game_over,
            room=self._room_to_response(room),
        )

    def restart(self, room_id: str, request: RestartRequest) -> RoomResponse:
        room = self.room_manager.get_room(room_id)
        room.restart(request.participant_id)
        return self._room_to_response(room)

    def get_events(self, room_id: str, after: int = 0) -> EventsResponse:
        room = self.room_manager.get_room(room_id)
        events = room.events_after(after)
        return EventsResponse(
            room_id=room_id,
            events=[self._event_info(event) for event in events],
            last_seq=events[-1].seq if events else after,
        )

    # --- conversion ---

    @staticmethod
    def _error_code(result: ActionResult) -> ErrorCode | None:
        if result.success:
            return None
        if result.error_code == RejectCode.NOT_YOUR_TURN:
            return ErrorCode.NOT_YOUR_TURN
        return ErrorCode.ILLEGAL_ACTION

    def _room_to_response(self, room: HostedRoom) -> RoomResponse:
        with room.lock:
            snapshot = room.match.snapshot()
            if snapshot.status.is_over:
                status = RoomStatus.GAME_OVER
            elif room.started:
                status = RoomStatus.PLAYING
            else:
                status = RoomStatus.WAITING

            return RoomResponse(
                room_id=room.room_id,
                status=status,
                turn=room.turn,
                phase=snapshot.phase.value,
                acting_side=snapshot.acting.value,
                acting_participant_id=room.acting_participant_id,
                participants=[
                    self._participant_info(room, pid) for pid in room.participants
                ],
                board=self._board_info(snapshot),
                winner=snapshot.status.winner.value if snapshot.status.is_over else None,
                game_over_reason=snapshot.status.reason.value if snapshot.status.is_over else None,
                created_at=room.created_at,
            )

    @staticmethod
    def _participant_info(room: HostedRoom, participant_id: int) -> ParticipantInfo:
        side = room.turns.participant_for(participant_id)
        return ParticipantInfo(
            participant_id=participant_id,
            name=room.names.get(participant_id, ""),
            side=side.value if side else None,
            is_authority=participant_id == room.turns.authority,
        )

    @staticmethod
    def _board_info(snapshot: MatchSnapshot) -> BoardInfo:
        return BoardInfo(
            width=snapshot.width,
            height=snapshot.height,
            cells=[[cell.value for cell in row] for row in snapshot.cells],
            p1_pos=PositionInfo(x=snapshot.p1_pos.x, y=snapshot.p1_pos.y),
            p2_pos=PositionInfo(x=snapshot.p2_pos.x, y=snapshot.p2_pos.y),
        )

    @staticmethod
    def _event_info(event: RoomEvent) -> EventInfo:
        return EventInfo(
            seq=event.seq,
            kind=event.kind,
            turn=event.turn,
            participant_id=event.participant_id,
            index=event.index,
            finished=event.finished,
            payload=event.payload,
        )
