"""
FastAPI Application - REST API for the presentation layer.

Endpoints:
    POST   /api/v1/sessions                           Create a meta game
    GET    /api/v1/sessions                           List active sessions
    GET    /api/v1/sessions/{id}                      Meta state + sub-boards
    DELETE /api/v1/sessions/{id}                      End session
    POST   /api/v1/sessions/{id}/moves                Play a cell
    POST   /api/v1/sessions/{id}/reset                Reset the meta game
    POST   /api/v1/sessions/{id}/boards/{i}/retry     Retry a failed sub-board

Board Service:
    POST   /tictactoe/new                             Create a sub-game
    GET    /tictactoe/{id}                            Get a sub-game
    POST   /tictactoe/{id}/move                       Play on a sub-game

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union

from ..config import get_settings


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body, Path, Query, Request
        from fastapi.encoders import jsonable_encoder
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from ..board_service import InvalidMove, SubGameNotFound
    from .service import APIService
    from .schemas import (
        # Request models
        MoveRequest,
        CreateSubGameRequest,
        SubGameMoveRequest,
        # Response models
        SessionResponse,
        TurnResponse,
        SubGameInfo,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    settings = get_settings()

    app = FastAPI(
        title="Ultimate Tic-Tac-Toe API",
        description="""
Orchestrates nine tic-tac-toe sub-games on a 3x3 meta board.

## Turn Flow

1. `POST /moves` with `board_index` and `cell_index`
2. The cell played decides which board the opponent must play next
3. `active_boards` in every response lists the playable boards

Moves on inactive boards come back with `success=false, status=ignored`.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `SUB_GAME_NOT_FOUND` | Sub-game does not exist |
| `INVALID_MOVE` | Board Service rejected the move |
| `VALIDATION_ERROR` | Request failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()
    app.state.api_service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
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

    def error_status(response: ErrorResponse) -> int:
        return 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(InvalidMove)
    async def invalid_move_handler(request: Request, exc: InvalidMove):
        return make_error_response(ErrorCode.INVALID_MOVE, str(exc))

    @app.exception_handler(SubGameNotFound)
    async def sub_game_not_found_handler(request: Request, exc: SubGameNotFound):
        return make_error_response(ErrorCode.SUB_GAME_NOT_FOUND, str(exc), status_code=404)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        status_code=201,
        tags=["Sessions"],
        summary="Create a new meta game",
    )
    async def create_session() -> SessionResponse:
        """Create a session and request its nine sub-games."""
        return await api_service.create_session()

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get meta state and sub-boards",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a session and release its sub-games."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Play a cell on a sub-board",
    )
    async def play_move(
        session_id: str,
        body: MoveRequest,
    ) -> Union[TurnResponse, JSONResponse]:
        """
        Play `cell_index` on sub-board `board_index` for the active player.

        **Request Body:**
        ```json
        {"board_index": 4, "cell_index": 2}
        ```
        """
        response = await api_service.play_move(session_id, body)
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code, response.error, status_code=error_status(response)
            )
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Reset the meta game",
    )
    async def reset(session_id: str) -> Union[TurnResponse, JSONResponse]:
        """Start over. `generation` increases and every sub-board gets a fresh sub-game."""
        response = await api_service.reset(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code, response.error, status_code=error_status(response)
            )
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/boards/{board_index}/retry",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Retry a failed sub-board",
    )
    async def retry_board(
        session_id: str,
        board_index: Annotated[int, Path(ge=0, le=8)],
    ) -> Union[TurnResponse, JSONResponse]:
        response = await api_service.retry_board(session_id, board_index)
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code, response.error, status_code=error_status(response)
            )
        return response

    # =========================================================================
    # Board Service Endpoints
    # =========================================================================

    @app.post(
        "/tictactoe/new",
        response_model=SubGameInfo,
        tags=["Board Service"],
        summary="Create a sub-game",
    )
    async def create_sub_game(
        body: Annotated[Optional[CreateSubGameRequest], Body()] = None,
    ) -> SubGameInfo:
        return await api_service.create_sub_game()

    @app.get(
        "/tictactoe/{sub_game_id}",
        response_model=SubGameInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Board Service"],
        summary="Get a sub-game",
    )
    async def get_sub_game(sub_game_id: str) -> SubGameInfo:
        return await api_service.get_sub_game(sub_game_id)

    @app.post(
        "/tictactoe/{sub_game_id}/move",
        response_model=SubGameInfo,
        responses={
            400: {"model": ErrorResponse, "description": "Cell occupied or game finished"},
            404: {"model": ErrorResponse},
        },
        tags=["Board Service"],
        summary="Play on a sub-game",
    )
    async def play_sub_game_move(sub_game_id: str, body: SubGameMoveRequest) -> SubGameInfo:
        return await api_service.play_sub_game_move(sub_game_id, body)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="ultimate-ttt",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Ultimate Tic-Tac-Toe API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn ultimate.api.app:app
app = create_app()
