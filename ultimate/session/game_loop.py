"""
Game Loop - Drives one session's sub-boards.

The loop:
1. Starts the nine sub-games
2. Accepts a (board, cell) choice from the user
3. Lets the sub-board adapter talk to the Board Service
4. Reports the resulting meta state
5. Resets on request

Everything runs on one asyncio event loop. Only one move per session
is in flight at a time; reset does not wait for it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING
import asyncio
import logging

from .adapter import PlayStatus

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    STARTING = "starting"
    WAITING_MOVE = "waiting_move"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a move.

    Contains the meta state after the move and any errors.
    """
    success: bool
    loop_state: LoopState
    status: PlayStatus | None = None
    message: str = ""

    # Meta state after the move
    state: dict[str, Any] = field(default_factory=dict)

    errors: list[str] = field(default_factory=list)

    # Game over info
    winner: str | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        await loop.start()

        result = await loop.play(board_index=4, cell_index=0)
        if not result.success:
            show(result.message)

        await loop.reset()
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.STARTING
        self._move_lock = asyncio.Lock()

    @property
    def machine(self):
        return self.session.machine

    async def start(self):
        """Request a sub-game for each of the nine boards."""
        await asyncio.gather(*(board.start() for board in self.session.boards))
        self._refresh_state()
        failed = [b.board_index for b in self.session.boards if b.error]
        if failed:
            logger.warning("Session %s: boards %s failed to start", self.session.session_id, failed)

    async def play(self, board_index: int, cell_index: int) -> TurnResult:
        """
        Play a cell on a sub-board for the active player.

        Moves on inactive boards are ignored, not errors.
        """
        if not 0 <= board_index < len(self.session.boards):
            return self._result(False, PlayStatus.IGNORED, f"Invalid board index: {board_index}")

        async with self._move_lock:
            if not self.machine.is_board_active(board_index):
                logger.debug("Ignoring move on inactive board %d", board_index)
                return self._result(
                    False, PlayStatus.IGNORED, f"Board {board_index} is not active"
                )

            board = self.session.boards[board_index]
            play = await board.play(cell_index)

        if play.applied:
            self.session.touch()
            logger.info(
                "Session %s: board %d cell %d (%s)",
                self.session.session_id, board_index, cell_index, play.message,
            )
        errors = [play.message] if play.status == PlayStatus.FAILED else []
        return self._result(play.applied, play.status, play.message, errors)

    async def reset(self) -> TurnResult:
        """Reset the meta game and restart every sub-board."""
        self.machine.reset()
        self.state = LoopState.STARTING
        await self.start()
        self.session.touch()
        return self._result(True, None, f"Generation {self.machine.generation}")

    async def retry(self, board_index: int) -> TurnResult:
        """Explicit user retry of a failed sub-board."""
        if not 0 <= board_index < len(self.session.boards):
            return self._result(False, PlayStatus.IGNORED, f"Invalid board index: {board_index}")
        board = self.session.boards[board_index]
        async with self._move_lock:
            retried = await board.retry()
        if not retried:
            return self._result(False, PlayStatus.IGNORED, "Board is busy")
        errors = [board.error] if board.error else []
        return self._result(not errors, None, board.error or "ok", errors)

    def _refresh_state(self):
        from .manager import SessionState

        if self.machine.meta_outcome() is not None:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
        else:
            self.state = LoopState.WAITING_MOVE
            self.session.state = SessionState.ACTIVE

    def _result(
        self,
        success: bool,
        status: PlayStatus | None,
        message: str,
        errors: list[str] | None = None,
    ) -> TurnResult:
        self._refresh_state()
        winner = self.machine.meta_outcome()
        return TurnResult(
            success=success,
            loop_state=self.state,
            status=status,
            message=message,
            state=self.session.snapshot(),
            errors=errors or [],
            winner=winner.value if winner else None,
        )
