"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the presentation layer
and the orchestrator. All responses include explicit types for OpenAPI
schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- SUB_GAME_NOT_FOUND: Board Service has no sub-game with that id
- INVALID_MOVE: Board Service rejected a move
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import Player


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    CREATED = "created"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SUB_GAME_NOT_FOUND = "SUB_GAME_NOT_FOUND"
    INVALID_MOVE = "INVALID_MOVE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class SubGameInfo(BaseModel):
    """One sub-game as held by the Board Service."""
    id: str
    board: list[Optional[str]] = Field(description="Nine cells: X, O or null")
    winner: Optional[str] = None
    is_draw: bool = False
    status: str = Field(description="in_progress, won, draw")


class SubBoardInfo(BaseModel):
    """A meta-cell as the presentation layer should render it."""
    board_index: int = Field(ge=0, le=8)
    is_active: bool
    loading: bool = False
    error: Optional[str] = Field(None, description="Set when the Board Service failed")
    sub_game: Optional[SubGameInfo] = None


# =============================================================================
# Request Models
# =============================================================================

class MoveRequest(BaseModel):
    """Play `cell_index` on sub-board `board_index` for the active player."""
    board_index: int = Field(..., ge=0, le=8)
    cell_index: int = Field(..., ge=0, le=8)


class CreateSubGameRequest(BaseModel):
    """Board Service: create a sub-game."""
    starting_player: Player = Field(Player.X, description="Accepted for compatibility")


class SubGameMoveRequest(BaseModel):
    """Board Service: place a mark."""
    index: int = Field(..., ge=0, le=8)
    player: Player


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Complete meta state plus every sub-board."""
    session_id: str
    status: SessionStatus
    outcomes: list[Optional[str]] = Field(description="Nine meta-cells: X, O, draw or null")
    active_player: Player
    required_board: Optional[int] = Field(None, ge=0, le=8)
    meta_outcome: Optional[str] = None
    generation: int = 0
    move_count: int = 0
    active_boards: list[int] = Field(default_factory=list)
    boards: list[SubBoardInfo] = Field(default_factory=list)
    created_at: float = 0.0
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """Response after a move, reset or retry."""
    session_id: str
    success: bool
    status: Optional[str] = Field(None, description="applied, ignored, stale, failed")
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    winner: Optional[str] = None
    state: SessionResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
