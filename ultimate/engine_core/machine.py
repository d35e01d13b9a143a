"""
Meta-Game State Machine - Owns the MetaState of one session.

The machine:
1. Receives move/outcome notifications from sub-board adapters
2. Runs them through the reducer
3. Commits the new state in a single assignment
4. Answers activation queries for the presentation layer

Contract violations (bad indices, outcome regressions) raise
ContractViolation in strict mode and are logged and dropped otherwise.
"""

from __future__ import annotations
import logging

from .state import MetaState, Outcome
from .events import Event, EventResult, MoveEvent, OutcomeEvent, ResetEvent
from .reducer import Reducer
from .errors import ContractViolation

logger = logging.getLogger(__name__)


class MetaGameStateMachine:
    """
    Single owner of a MetaState.

    Usage:
        machine = MetaGameStateMachine()
        machine.on_move(4, 2)            # X played cell 2 on board 4
        machine.on_outcome(2, Outcome.O)
        machine.is_board_active(2)       # False, board 2 is finished
    """

    def __init__(self, state: MetaState | None = None, strict: bool | None = None):
        if strict is None:
            from ..config import get_settings
            strict = get_settings().strict_contracts
        self.strict = strict
        self._state = state or MetaState()
        self._reducer = Reducer()

    @property
    def state(self) -> MetaState:
        return self._state

    @property
    def generation(self) -> int:
        return self._state.generation

    def dispatch(self, event: Event) -> EventResult:
        """Apply an event and commit the result if accepted."""
        result = self._reducer.apply(self._state, event)

        if result.accepted:
            self._state = result.new_state
            for change in result.changes:
                logger.debug(change)
        elif result.is_contract_violation:
            if self.strict:
                raise ContractViolation(result.reason, event=event)
            logger.warning("Contract violation ignored: %s", result.reason)
        else:
            logger.debug("Event %s not applied: %s", event, result.reason)

        return result

    def on_move(self, board_index: int, cell_index: int) -> EventResult:
        """A move was accepted in sub-game `board_index` at `cell_index`."""
        return self.dispatch(MoveEvent(board_index, cell_index))

    def on_outcome(self, board_index: int, outcome: Outcome) -> EventResult:
        """Sub-game `board_index` became terminal."""
        return self.dispatch(OutcomeEvent(board_index, outcome))

    def reset(self) -> EventResult:
        """Start a new meta game. Sub-boards observe the generation bump."""
        result = self.dispatch(ResetEvent())
        logger.info("Meta game reset (generation %d)", self.generation)
        return result

    def is_board_active(self, board_index: int) -> bool:
        if not 0 <= board_index < len(self._state.outcomes):
            if self.strict:
                raise ContractViolation(f"board_index out of range: {board_index!r}")
            logger.warning("is_board_active called with bad index %r", board_index)
            return False
        return self._state.is_board_active(board_index)

    def active_boards(self) -> list[int]:
        return self._state.active_boards()

    def meta_outcome(self) -> Outcome | None:
        return self._state.meta_outcome

    def snapshot(self) -> dict:
        return self._state.snapshot()
