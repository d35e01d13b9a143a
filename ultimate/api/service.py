"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session/game loop calls
2. Manages sessions
3. Exposes the Board Service contract
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    MoveRequest,
    SubGameMoveRequest,
    # Responses
    SessionResponse,
    TurnResponse,
    ErrorResponse,
    # Shared
    SubBoardInfo,
    SubGameInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..board_service import SubGameState
from ..config import get_settings
from ..session import SessionManager, Session, TurnResult


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = await service.create_session()
        turn = await service.play_move(session.session_id, MoveRequest(board_index=4, cell_index=0))
        await service.reset(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    session_max_age: int = field(default_factory=lambda: get_settings().session_max_age)

    @property
    def board_service(self):
        return self.session_manager.service

    async def create_session(self) -> SessionResponse:
        """Create a session and start its nine sub-games."""
        self.session_manager.cleanup_stale_sessions(self.session_max_age)
        session = self.session_manager.create_session()
        await self.session_manager.get_loop(session.session_id).start()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    async def play_move(
        self,
        session_id: str,
        request: MoveRequest,
    ) -> TurnResponse | ErrorResponse:
        """Play a move on a sub-board. Ignored moves come back with success=False."""
        loop = self.session_manager.get_loop(session_id)
        if not loop:
            return self._not_found(session_id)

        result = await loop.play(request.board_index, request.cell_index)
        return self._turn_to_response(loop.session, result)

    async def reset(self, session_id: str) -> TurnResponse | ErrorResponse:
        """Reset the meta game of a session."""
        loop = self.session_manager.get_loop(session_id)
        if not loop:
            return self._not_found(session_id)

        result = await loop.reset()
        return self._turn_to_response(loop.session, result)

    async def retry_board(
        self,
        session_id: str,
        board_index: int,
    ) -> TurnResponse | ErrorResponse:
        """Retry a sub-board that is in an error state."""
        loop = self.session_manager.get_loop(session_id)
        if not loop:
            return self._not_found(session_id)

        result = await loop.retry(board_index)
        return self._turn_to_response(loop.session, result)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Board Service contract
    # =========================================================================

    async def create_sub_game(self) -> SubGameInfo:
        sub_game = await self.board_service.create_sub_game()
        return self._sub_game_to_info(sub_game)

    async def get_sub_game(self, sub_game_id: str) -> SubGameInfo:
        """Raises SubGameNotFound."""
        sub_game = await self.board_service.get_sub_game(sub_game_id)
        return self._sub_game_to_info(sub_game)

    async def play_sub_game_move(
        self,
        sub_game_id: str,
        request: SubGameMoveRequest,
    ) -> SubGameInfo:
        """Raises InvalidMove or SubGameNotFound."""
        sub_game = await self.board_service.play_move(
            sub_game_id, request.index, request.player
        )
        return self._sub_game_to_info(sub_game)

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _sub_game_to_info(self, sub_game: SubGameState) -> SubGameInfo:
        return SubGameInfo(**sub_game.to_dict())

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        data = session.snapshot()
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(data["status"]),
            outcomes=data["outcomes"],
            active_player=data["active_player"],
            required_board=data["required_board"],
            meta_outcome=data["meta_outcome"],
            generation=data["generation"],
            move_count=data["move_count"],
            active_boards=data["active_boards"],
            boards=[
                SubBoardInfo(
                    board_index=b["board_index"],
                    is_active=b["is_active"],
                    loading=b["loading"],
                    error=b["error"],
                    sub_game=SubGameInfo(**b["sub_game"]) if b["sub_game"] else None,
                )
                for b in data["boards"]
            ],
            created_at=session.created_at,
        )

    def _turn_to_response(self, session: Session, result: TurnResult) -> TurnResponse:
        """Convert TurnResult to TurnResponse."""
        return TurnResponse(
            session_id=session.session_id,
            success=result.success,
            status=result.status.value if result.status else None,
            message=result.message,
            errors=result.errors,
            winner=result.winner,
            state=self._session_to_response(session),
        )
