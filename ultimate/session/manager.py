"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. User starts a session → one state machine, nine sub-board adapters
2. During the game, moves flow adapter → Board Service → state machine
3. Reset bumps the generation; adapters request fresh sub-games
4. Session ends → removed from memory

PERSISTENCE RULES:
- No database
- Meta state lives only as long as the process
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..board_service import BoardService, InMemoryBoardService
from ..engine_core import MetaGameStateMachine, BOARD_CELLS
from .adapter import SubBoard
from .game_loop import GameLoop

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Sub-games not started yet
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Meta game decided
    ABANDONED = "abandoned"  # User quit


@dataclass
class Session:
    """
    An ephemeral meta game.

    Owns the state machine; each SubBoard holds a reference to it.
    """
    session_id: str
    machine: MetaGameStateMachine
    service: BoardService
    created_at: float

    state: SessionState = SessionState.CREATED
    boards: list[SubBoard] = field(default_factory=list)
    last_activity: float = 0.0

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still playable."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    def touch(self):
        self.last_activity = time.time()

    def snapshot(self) -> dict[str, Any]:
        """Meta state plus every sub-board, for the presentation layer."""
        data = self.machine.snapshot()
        data["session_id"] = self.session_id
        data["status"] = self.state.value
        data["boards"] = [board.snapshot() for board in self.boards]
        return data


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their state machine and adapters
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, service: BoardService | None = None, strict: bool | None = None):
        self.service = service or InMemoryBoardService()
        self.strict = strict
        self._sessions: dict[str, Session] = {}
        self._loops: dict[str, GameLoop] = {}

    def create_session(self) -> Session:
        """
        Create a new session.

        Sub-games are not requested yet; call `await get_loop(id).start()`.
        """
        machine = MetaGameStateMachine(strict=self.strict)
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            machine=machine,
            service=self.service,
            created_at=now,
            last_activity=now,
        )
        session.boards = [
            SubBoard(i, machine, self.service) for i in range(BOARD_CELLS)
        ]

        self._sessions[session.session_id] = session
        self._loops[session.session_id] = GameLoop(session)
        logger.info("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def get_loop(self, session_id: str) -> GameLoop | None:
        return self._loops.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        self._loops.pop(session_id, None)
        if not session:
            return False

        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED

        for board in session.boards:
            if board.sub_game:
                self.service.discard(board.sub_game.id)
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the IDs removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
