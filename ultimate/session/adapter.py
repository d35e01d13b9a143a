"""
Sub-board adapter - Bridges one meta-cell to its Board Service sub-game.

Each adapter:
1. Requests a sub-game from the Board Service
2. Forwards the user's cell choice with the active player
3. Reports the accepted move, then any terminal outcome, to the machine
4. Drops responses issued under an older generation
5. Holds a per-board error until the user retries
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any
import logging

from ..board_service import BoardService, BoardServiceError, SubGameState
from ..engine_core import MetaGameStateMachine, BOARD_CELLS

logger = logging.getLogger(__name__)


class PlayStatus(Enum):
    """What happened to a play request."""
    APPLIED = "applied"
    IGNORED = "ignored"
    STALE = "stale"
    FAILED = "failed"


@dataclass
class PlayResult:
    status: PlayStatus
    message: str = ""

    @property
    def applied(self) -> bool:
        return self.status == PlayStatus.APPLIED


class SubBoard:
    """
    Adapter for the sub-game at `board_index`.

    The state machine is owned by the session and passed in by reference.
    """

    def __init__(
        self,
        board_index: int,
        machine: MetaGameStateMachine,
        service: BoardService,
    ):
        self.board_index = board_index
        self.machine = machine
        self.service = service

        self.sub_game: SubGameState | None = None
        self.generation = machine.generation
        self.loading = False
        self.error: str | None = None

    @property
    def is_active(self) -> bool:
        return self.machine.is_board_active(self.board_index)

    def _is_current(self, generation: int) -> bool:
        return generation == self.machine.generation

    async def start(self):
        """Discard any sub-game and request a fresh one for the current generation."""
        generation = self.machine.generation
        self.generation = generation
        if self.sub_game is not None:
            self.service.discard(self.sub_game.id)
        self.sub_game = None
        self.error = None
        self.loading = True
        try:
            sub_game = await self.service.create_sub_game()
        except BoardServiceError as e:
            if self._is_current(generation):
                self.error = str(e) or "Failed to start game"
                logger.error("Board %d: failed to start sub-game: %s", self.board_index, e)
            return
        finally:
            if self._is_current(generation):
                self.loading = False

        if not self._is_current(generation):
            logger.warning(
                "Board %d: dropping sub-game created for generation %d",
                self.board_index, generation,
            )
            self.service.discard(sub_game.id)
            return
        self.sub_game = sub_game

    async def play(self, cell_index: int) -> PlayResult:
        """
        Play `cell_index` for the active player.

        Ignored without contacting the Board Service when the board is not
        playable, busy, or the cell is taken.
        """
        if not 0 <= cell_index < BOARD_CELLS:
            return PlayResult(PlayStatus.IGNORED, f"Invalid cell index: {cell_index}")
        if self.sub_game is None:
            return PlayResult(PlayStatus.IGNORED, "Sub-game not ready")
        if self.loading:
            return PlayResult(PlayStatus.IGNORED, "Board is busy")
        if not self.is_active:
            return PlayResult(PlayStatus.IGNORED, f"Board {self.board_index} is not active")
        if self.sub_game.is_terminal or self.sub_game.board[cell_index] is not None:
            return PlayResult(PlayStatus.IGNORED, "Cell is not playable")

        generation = self.machine.generation
        sub_game_id = self.sub_game.id
        player = self.machine.state.active_player

        self.loading = True
        self.error = None
        try:
            updated = await self.service.play_move(sub_game_id, cell_index, player)
        except BoardServiceError as e:
            if not self._is_current(generation):
                return PlayResult(PlayStatus.STALE, "Reset during request")
            self.error = str(e) or "Move failed"
            logger.error("Board %d: move failed: %s", self.board_index, e)
            return PlayResult(PlayStatus.FAILED, self.error)
        finally:
            if self._is_current(generation):
                self.loading = False

        if not self._is_current(generation) or self.sub_game is None \
                or self.sub_game.id != sub_game_id:
            logger.warning(
                "Board %d: discarding response from generation %d (now %d)",
                self.board_index, generation, self.machine.generation,
            )
            return PlayResult(PlayStatus.STALE, "Reset during request")

        self.sub_game = updated
        self.machine.on_move(self.board_index, cell_index)
        if updated.outcome is not None:
            self.machine.on_outcome(self.board_index, updated.outcome)

        return PlayResult(PlayStatus.APPLIED, f"{player.value} played {cell_index}")

    async def retry(self) -> bool:
        """
        Recover from an error: re-create if never started, else re-query.

        Returns False without doing anything while a request is in flight.
        """
        if self.loading:
            logger.debug("Board %d: retry ignored, request in flight", self.board_index)
            return False
        if self.sub_game is None:
            await self.start()
            return True

        generation = self.machine.generation
        sub_game_id = self.sub_game.id
        self.loading = True
        self.error = None
        try:
            refreshed = await self.service.get_sub_game(sub_game_id)
        except BoardServiceError as e:
            if self._is_current(generation):
                self.error = str(e) or "Failed to refresh game"
                logger.error("Board %d: refresh failed: %s", self.board_index, e)
            return True
        finally:
            if self._is_current(generation):
                self.loading = False

        if self._is_current(generation) and self.sub_game and self.sub_game.id == sub_game_id:
            self.sub_game = refreshed
            if refreshed.outcome is not None:
                self.machine.on_outcome(self.board_index, refreshed.outcome)
        return True

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of this sub-board."""
        sub_game = self.sub_game.to_dict() if self.sub_game else None
        return {
            "board_index": self.board_index,
            "is_active": self.is_active,
            "loading": self.loading,
            "error": self.error,
            "sub_game": sub_game,
        }
