"""
Board Service - Owns the cells of every sub-game.

Provides:
- BoardService: async interface the orchestrator consumes
- SubGameState: one sub-game's cells and terminal status
- InMemoryBoardService: process-local implementation
"""

from .base import (
    BoardService,
    SubGameState,
    SubGameStatus,
    BoardServiceError,
    InvalidMove,
    SubGameNotFound,
)
from .memory import InMemoryBoardService

__all__ = [
    "BoardService",
    "SubGameState",
    "SubGameStatus",
    "BoardServiceError",
    "InvalidMove",
    "SubGameNotFound",
    "InMemoryBoardService",
]
