"""
Reducer - Applies events to meta state.

The reducer is the single point of state mutation.
All state changes must go through apply_event().

Design principles:
- Pure function: (state, event) -> new_state
- Validates before applying
- Returns EventResult with accepted/rejected
- Never raises for bad input; the machine decides how loud to be
"""

from __future__ import annotations

from .state import MetaState, Outcome, BOARD_CELLS
from .events import (
    Event, EventType, EventResult, EventErrorCode,
    MoveEvent, OutcomeEvent, ResetEvent,
)


def _in_range(index) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < BOARD_CELLS


class Reducer:
    """
    Reducer applies events to meta state.

    Stateless - all state is in MetaState.
    """

    def apply(self, state: MetaState, event: Event) -> EventResult:
        """
        Apply an event to the meta state.

        Returns EventResult with new state or the reason it was not applied.
        """
        validation_error = self._validate_event(event)
        if validation_error:
            return EventResult.rejected(validation_error, EventErrorCode.CONTRACT_VIOLATION)

        handler = self._get_handler(event.event_type)
        if not handler:
            return EventResult.rejected(
                f"No handler for event type: {event.event_type}",
                EventErrorCode.NO_HANDLER,
            )
        return handler(state, event)

    def _validate_event(self, event: Event) -> str | None:
        """
        Check the input contract (index ranges, outcome values).

        Returns error message if invalid, None if valid.
        """
        if isinstance(event, MoveEvent):
            if not _in_range(event.board_index):
                return f"board_index out of range: {event.board_index!r}"
            if not _in_range(event.cell_index):
                return f"cell_index out of range: {event.cell_index!r}"
        elif isinstance(event, OutcomeEvent):
            if not _in_range(event.board_index):
                return f"board_index out of range: {event.board_index!r}"
            if not isinstance(event.outcome, Outcome):
                return f"outcome must be X, O or draw, got {event.outcome!r}"
        return None

    def _get_handler(self, event_type: EventType):
        """Get the handler function for an event type."""
        handlers = {
            EventType.MOVE: self._handle_move,
            EventType.OUTCOME: self._handle_outcome,
            EventType.RESET: self._handle_reset,
        }
        return handlers.get(event_type)

    def _handle_move(self, state: MetaState, event: MoveEvent) -> EventResult:
        """
        Handle a move reported by a sub-game.

        The opponent is sent to the sub-game named by cell_index,
        unless that one is already finished.
        """
        board, cell = event.board_index, event.cell_index

        if state.meta_outcome is not None:
            return EventResult.rejected("Game is over", EventErrorCode.MOVE_IGNORED)
        if state.outcomes[board] is not None:
            return EventResult.rejected(
                f"Board {board} is already finished", EventErrorCode.MOVE_IGNORED
            )
        if state.required_board is not None and state.required_board != board:
            return EventResult.rejected(
                f"Board {state.required_board} is required, not {board}",
                EventErrorCode.MOVE_IGNORED,
            )

        required = cell if state.outcomes[cell] is None else None
        player = state.active_player
        new_state = state._copy_with(
            required_board=required,
            active_player=player.opponent,
            move_count=state.move_count + 1,
        )

        changes = [f"{player.value} played cell {cell} on board {board}"]
        if required is None:
            changes.append(f"{player.opponent.value} may play any open board")
        else:
            changes.append(f"{player.opponent.value} must play board {required}")
        return EventResult.success_with_state(new_state, changes=changes)

    def _handle_outcome(self, state: MetaState, event: OutcomeEvent) -> EventResult:
        """
        Handle a sub-game becoming terminal.

        If the finished board was the required one, the next player
        gets a free choice.
        """
        board, outcome = event.board_index, event.outcome
        current = state.outcomes[board]

        if current is not None:
            if current == outcome:
                return EventResult.rejected(
                    f"Board {board} already resolved as {current.value}",
                    EventErrorCode.ALREADY_RESOLVED,
                )
            return EventResult.rejected(
                f"Board {board} is {current.value}, cannot become {outcome.value}",
                EventErrorCode.CONTRACT_VIOLATION,
            )

        new_state = state.with_outcome(board, outcome)
        changes = [f"Board {board} finished: {outcome.value}"]
        if state.required_board == board:
            new_state = new_state._copy_with(required_board=None)
            changes.append("Required board finished, choice is open")

        meta = new_state.meta_outcome
        if meta is not None:
            changes.append(f"Meta game over: {meta.value}")
        return EventResult.success_with_state(new_state, changes=changes)

    def _handle_reset(self, state: MetaState, event: ResetEvent) -> EventResult:
        """Handle a reset: fresh board, X to move, next generation."""
        new_state = MetaState(generation=state.generation + 1)
        return EventResult.success_with_state(
            new_state,
            changes=[f"Reset to generation {new_state.generation}"],
        )


def apply_event(state: MetaState, event: Event) -> EventResult:
    """Convenience function to apply an event."""
    return Reducer().apply(state, event)
