"""
Session Module - Manages ephemeral meta games.

A session represents one play-through:
- Created when the user starts a game
- Owns the meta-game state machine and nine sub-board adapters
- Destroyed when the user ends it

Sessions are EPHEMERAL:
- No persistence to database
- Sub-game cells live in the Board Service
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult
from .adapter import SubBoard, PlayResult, PlayStatus

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "SubBoard",
    "PlayResult",
    "PlayStatus",
]
