"""
Board Service interface.

The orchestrator treats the Board Service as the only source of truth for
sub-game cell contents and sub-game outcome. Calls are async: the meta
state only changes once a response is in hand.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..engine_core.state import Player, Outcome, BOARD_CELLS


class BoardServiceError(Exception):
    """Base class for Board Service failures."""


class InvalidMove(BoardServiceError):
    """Cell occupied, index out of range, or sub-game already finished."""


class SubGameNotFound(BoardServiceError):
    """No sub-game with that id."""


class SubGameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass
class SubGameState:
    """
    One sub-game as returned by the Board Service.

    `board` holds nine cells, each a Player or None.
    """
    id: str
    board: list[Player | None] = field(default_factory=lambda: [None] * BOARD_CELLS)
    winner: Player | None = None
    is_draw: bool = False

    @property
    def status(self) -> SubGameStatus:
        if self.winner is not None:
            return SubGameStatus.WON
        if self.is_draw:
            return SubGameStatus.DRAW
        return SubGameStatus.IN_PROGRESS

    @property
    def outcome(self) -> Outcome | None:
        """Terminal outcome, or None while in progress."""
        if self.winner is not None:
            return Outcome.for_player(self.winner)
        if self.is_draw:
            return Outcome.DRAW
        return None

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "board": [c.value if c else None for c in self.board],
            "winner": self.winner.value if self.winner else None,
            "is_draw": self.is_draw,
            "status": self.status.value,
        }


class BoardService(ABC):
    """
    Abstract base class for Board Services.

    Implementations may be in-process or remote.
    """

    @abstractmethod
    async def create_sub_game(self) -> SubGameState:
        """Create a fresh, empty sub-game."""
        pass

    @abstractmethod
    async def play_move(
        self,
        sub_game_id: str,
        cell_index: int,
        player: Player,
    ) -> SubGameState:
        """
        Place `player` on `cell_index`.

        Raises:
            InvalidMove: cell occupied, index out of range, or game finished
            SubGameNotFound: unknown id
        """
        pass

    @abstractmethod
    async def get_sub_game(self, sub_game_id: str) -> SubGameState:
        """Return the current state of a sub-game."""
        pass

    def discard(self, sub_game_id: str):
        """Release a sub-game that is no longer shown. Default keeps it."""
        pass
