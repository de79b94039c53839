"""
FastAPI Application - REST API for hosted rooms.

Endpoints:
    GET    /api/v1/health                                  Health check
    POST   /api/v1/rooms                                   Open a room
    GET    /api/v1/rooms/{id}                              Room state
    DELETE /api/v1/rooms/{id}                              Close a room
    POST   /api/v1/rooms/{id}/participants                 Join
    DELETE /api/v1/rooms/{id}/participants/{pid}           Leave
    POST   /api/v1/rooms/{id}/actions                      Submit (index, finished)
    POST   /api/v1/rooms/{id}/restart                      Restart for everyone
    GET    /api/v1/rooms/{id}/events?after=N               Event log since N

Turn Flow:
    1. Two participants join; the first is the authority and plays BLUE
    2. The acting participant posts a move (finished=false)
    3. Then a break (finished=true); the room begins the next turn
    4. Every client polls /events and replays actions on its own board

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated
import logging

from ..config import ALLOWED_ORIGINS, TILEBREAK_ENV
from ..exceptions import (
    ParticipantNotFound,
    RoomFull,
    RoomNotFound,
    TileBreakError,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query, Request
    from fastapi.encoders import jsonable_encoder
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        ActionRequest,
        ActionResponse,
        CloseRoomResponse,
        CreateRoomRequest,
        ErrorCode,
        ErrorResponse,
        EventsResponse,
        HealthResponse,
        JoinRoomRequest,
        JoinRoomResponse,
        RestartRequest,
        RoomResponse,
    )

    app = FastAPI(
        title="Tilebreak Room API",
        description="""
Two-player "move then break" board game rooms.

## Error Codes

| Code | Description |
|------|-------------|
| `ROOM_NOT_FOUND` | Room does not exist or was closed |
| `ROOM_FULL` | Room already holds two participants |
| `PARTICIPANT_NOT_FOUND` | Participant is not in the room |
| `VALIDATION_ERROR` | Malformed request body or parameters |

Rule rejections (illegal move, wrong phase, out of turn) are reported in
the action response as `accepted=false` with
`error_code` `NOT_YOUR_TURN` or `ILLEGAL_ACTION`, not as HTTP errors.
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    error_map = {
        RoomNotFound: (ErrorCode.ROOM_NOT_FOUND, 404),
        ParticipantNotFound: (ErrorCode.PARTICIPANT_NOT_FOUND, 404),
        RoomFull: (ErrorCode.ROOM_FULL, 409),
    }

    @app.exception_handler(TileBreakError)
    async def handle_tilebreak_error(request: Request, exc: TileBreakError):
        error_code, status_code = error_map.get(type(exc), (ErrorCode.INTERNAL_ERROR, 500))
        if status_code >= 500:
            logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
        return make_error_response(error_code, str(exc), status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=f"tilebreak ({TILEBREAK_ENV})", version=API_VERSION)

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms",
        response_model=RoomResponse,
        tags=["Rooms"],
        summary="Open a new room",
    )
    def create_room(body: CreateRoomRequest) -> RoomResponse:
        """Open a room. Board sizes below 3 are clamped to 3."""
        return api_service.create_room(body)

    @app.get(
        "/api/v1/rooms/{room_id}",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Get room state",
    )
    def get_room(room_id: str) -> RoomResponse:
        return api_service.get_room(room_id)

    @app.delete(
        "/api/v1/rooms/{room_id}",
        response_model=CloseRoomResponse,
        tags=["Rooms"],
        summary="Close a room",
    )
    def close_room(room_id: str) -> CloseRoomResponse:
        return api_service.close_room(room_id)

    @app.post(
        "/api/v1/rooms/{room_id}/participants",
        response_model=JoinRoomResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Room is full"},
        },
        tags=["Rooms"],
        summary="Join a room",
    )
    def join_room(room_id: str, body: JoinRoomRequest) -> JoinRoomResponse:
        """
        Join a room.

        The first participant is the authority and plays BLUE. The first
        turn begins as soon as the second participant joins.
        """
        return api_service.join_room(room_id, body)

    @app.delete(
        "/api/v1/rooms/{room_id}/participants/{participant_id}",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Leave a room",
    )
    def leave_room(room_id: str, participant_id: int) -> RoomResponse:
        return api_service.leave_room(room_id, participant_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms/{room_id}/actions",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Submit a move or a break",
    )
    def submit_action(room_id: str, body: ActionRequest) -> ActionResponse:
        """
        Submit an action.

        **Request Body:**
        ```json
        {"participant_id": 1, "index": 7, "finished": false}
        ```
        `finished=false` is a move, `finished=true` is the break that ends
        the turn.
        """
        return api_service.submit_action(room_id, body)

    @app.post(
        "/api/v1/rooms/{room_id}/restart",
        response_model=RoomResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Restart the match for every participant",
    )
    def restart(room_id: str, body: RestartRequest) -> RoomResponse:
        return api_service.restart(room_id, body)

    @app.get(
        "/api/v1/rooms/{room_id}/events",
        response_model=EventsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Room events after a sequence number",
    )
    def get_events(
        room_id: str,
        after: Annotated[int, Query(ge=0, description="Return events with seq > after")] = 0,
    ) -> EventsResponse:
        return api_service.get_events(room_id, after)

    return app


# For running directly: uvicorn tilebreak.api.app:app
app = create_app()
