"""
Engine Core - Deterministic meta-game state management.

The engine is the runtime that:
1. Holds the outcome of each of the nine sub-games
2. Tracks whose turn it is and which board is required
3. Applies move/outcome/reset events via the reducer
4. Computes the meta winner
"""

from .state import MetaState, Player, Outcome, WIN_LINES, BOARD_CELLS, winning_outcome
from .events import (
    Event, EventType, EventResult, EventErrorCode,
    MoveEvent, OutcomeEvent, ResetEvent,
)
from .reducer import Reducer, apply_event
from .machine import MetaGameStateMachine
from .errors import ContractViolation

__all__ = [
    "MetaState",
    "Player",
    "Outcome",
    "WIN_LINES",
    "BOARD_CELLS",
    "winning_outcome",
    "Event",
    "EventType",
    "EventResult",
    "EventErrorCode",
    "MoveEvent",
    "OutcomeEvent",
    "ResetEvent",
    "Reducer",
    "apply_event",
    "MetaGameStateMachine",
    "ContractViolation",
]
