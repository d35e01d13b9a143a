"""
Event System - Events and results.

Events represent:
1. A move accepted by a sub-game (which sub-game is required next)
2. A sub-game reaching a terminal outcome
3. A user-initiated reset of the whole meta game

All state changes flow through events.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Outcome


class EventType(Enum):
    """Types of events the state machine consumes."""
    MOVE = "move"
    OUTCOME = "outcome"
    RESET = "reset"


@dataclass(frozen=True)
class MoveEvent:
    """
    A move accepted inside sub-game `board_index`.

    `cell_index` selects the sub-game the opponent is sent to.
    """
    board_index: int
    cell_index: int

    event_type = EventType.MOVE


@dataclass(frozen=True)
class OutcomeEvent:
    """Sub-game `board_index` became terminal."""
    board_index: int
    outcome: Outcome | None

    event_type = EventType.OUTCOME


@dataclass(frozen=True)
class ResetEvent:
    """Start over; bumps the generation."""

    event_type = EventType.RESET


Event = MoveEvent | OutcomeEvent | ResetEvent


class EventErrorCode:
    """Reasons an event was not applied."""
    MOVE_IGNORED = "MOVE_IGNORED"
    ALREADY_RESOLVED = "ALREADY_RESOLVED"
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"
    NO_HANDLER = "NO_HANDLER"


@dataclass
class EventResult:
    """
    Result of applying an event.

    Contains:
    - Whether the event changed the state
    - New state (if accepted)
    - Reason and code (if not)
    - Human-readable changes (for logs and UI)
    """
    accepted: bool
    new_state: Any | None = None  # MetaState
    reason: str | None = None
    error_code: str | None = None
    changes: list[str] = field(default_factory=list)

    @property
    def is_contract_violation(self) -> bool:
        return self.error_code == EventErrorCode.CONTRACT_VIOLATION

    @classmethod
    def rejected(cls, reason: str, error_code: str) -> EventResult:
        """Create a result for an event that left the state untouched."""
        return cls(accepted=False, reason=reason, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> EventResult:
        """Create a success result with new state."""
        return cls(accepted=True, new_state=state, changes=changes or [])
