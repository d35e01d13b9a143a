"""
API Module - Presentation-facing interface.

Exposes the orchestrator via REST:
1. Create a session (nine sub-games)
2. Play cells; the response says which boards are playable next
3. Reset or retry failed sub-boards
4. The Board Service contract itself, under /tictactoe

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    MoveRequest,
    CreateSubGameRequest,
    SubGameMoveRequest,
    # Responses
    SessionResponse,
    TurnResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Shared
    SubBoardInfo,
    SubGameInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "MoveRequest",
    "CreateSubGameRequest",
    "SubGameMoveRequest",
    # Responses
    "SessionResponse",
    "TurnResponse",
    "ErrorResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    # Shared
    "SubBoardInfo",
    "SubGameInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
