"""
Meta State - The state of the 3x3 grid of sub-games.

Design principles:
- Immutable-friendly: all mutations return new state
- Serializable: snapshot() gives a JSON-ready dict
- Derived values are computed, never stored (meta_outcome)
- Sub-game cell contents live in the Board Service, not here
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


BOARD_CELLS = 9

# Rows, columns, diagonals. Checked in this order.
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class Player(str, Enum):
    """The two sides."""
    X = "X"
    O = "O"

    @property
    def opponent(self) -> Player:
        return Player.O if self is Player.X else Player.X


class Outcome(str, Enum):
    """
    Terminal result of a (sub- or meta-) game.

    An unfinished game has no Outcome; it is represented as None.
    """
    X = "X"
    O = "O"
    DRAW = "draw"

    @classmethod
    def for_player(cls, player: Player) -> Outcome:
        return cls(player.value)


def winning_outcome(cells: list[Any]) -> Any | None:
    """
    Return the value holding a full line, or None.

    Draw never claims a line. Lines are tried in WIN_LINES order.
    """
    for a, b, c in WIN_LINES:
        value = cells[a]
        if value is None or value == Outcome.DRAW:
            continue
        if value == cells[b] == cells[c]:
            return value
    return None


@dataclass
class MetaState:
    """
    Complete meta-game state at a point in time.

    This is the canonical state that the state machine operates on.
    All state changes go through the reducer.
    """
    outcomes: list[Outcome | None] = field(
        default_factory=lambda: [None] * BOARD_CELLS
    )
    active_player: Player = Player.X
    required_board: int | None = None
    generation: int = 0

    # Accepted moves this generation (status display only)
    move_count: int = 0

    @property
    def meta_outcome(self) -> Outcome | None:
        """Winner of the meta board, Draw when all nine are terminal, else None."""
        winner = winning_outcome(self.outcomes)
        if winner is not None:
            return winner
        if all(o is not None for o in self.outcomes):
            return Outcome.DRAW
        return None

    @property
    def is_over(self) -> bool:
        return self.meta_outcome is not None

    def is_board_active(self, board_index: int) -> bool:
        """Whether a move on this sub-board is playable right now."""
        if self.meta_outcome is not None:
            return False
        if self.outcomes[board_index] is not None:
            return False
        if self.required_board is None:
            return True
        return self.required_board == board_index

    def active_boards(self) -> list[int]:
        return [i for i in range(BOARD_CELLS) if self.is_board_active(i)]

    def with_outcome(self, board_index: int, outcome: Outcome) -> MetaState:
        """Return new state with one meta-cell resolved."""
        new_outcomes = self.outcomes.copy()
        new_outcomes[board_index] = outcome
        return self._copy_with(outcomes=new_outcomes)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view for the presentation layer."""
        meta = self.meta_outcome
        return {
            "outcomes": [o.value if o else None for o in self.outcomes],
            "active_player": self.active_player.value,
            "required_board": self.required_board,
            "meta_outcome": meta.value if meta else None,
            "generation": self.generation,
            "move_count": self.move_count,
            "active_boards": self.active_boards(),
        }

    def _copy_with(self, **kwargs) -> MetaState:
        """Create a copy with some fields replaced."""
        return MetaState(
            outcomes=kwargs.get("outcomes", self.outcomes),
            active_player=kwargs.get("active_player", self.active_player),
            required_board=kwargs.get("required_board", self.required_board),
            generation=kwargs.get("generation", self.generation),
            move_count=kwargs.get("move_count", self.move_count),
        )
