"""
In-memory Board Service.

Holds every sub-game in a dict keyed by id. Used by the CLI, the HTTP
board routes and the tests.
"""

from __future__ import annotations
from copy import deepcopy
import logging
import uuid

from .base import BoardService, SubGameState, InvalidMove, SubGameNotFound
from ..engine_core.state import Player, BOARD_CELLS, winning_outcome

logger = logging.getLogger(__name__)


class InMemoryBoardService(BoardService):
    """
    Process-local sub-game store.

    Returned states are copies; callers cannot mutate the stored game.
    """

    def __init__(self):
        self._games: dict[str, SubGameState] = {}

    async def create_sub_game(self) -> SubGameState:
        game = SubGameState(id=str(uuid.uuid4()))
        self._games[game.id] = game
        logger.debug("Created sub-game %s", game.id)
        return deepcopy(game)

    async def play_move(
        self,
        sub_game_id: str,
        cell_index: int,
        player: Player,
    ) -> SubGameState:
        game = self._get(sub_game_id)

        if game.is_terminal:
            raise InvalidMove("Game is already finished")
        if not isinstance(cell_index, int) or not 0 <= cell_index < BOARD_CELLS:
            raise InvalidMove(f"Invalid cell index: {cell_index!r}")
        if game.board[cell_index] is not None:
            raise InvalidMove("Cell is already occupied")

        try:
            player = Player(player)
        except ValueError:
            raise InvalidMove(f"Invalid player: {player!r}")

        game.board[cell_index] = player

        winner = winning_outcome(game.board)
        if winner is not None:
            game.winner = Player(winner)
        elif all(cell is not None for cell in game.board):
            game.is_draw = True

        return deepcopy(game)

    async def get_sub_game(self, sub_game_id: str) -> SubGameState:
        return deepcopy(self._get(sub_game_id))

    def discard(self, sub_game_id: str):
        """Forget a sub-game. Unknown ids are ignored."""
        self._games.pop(sub_game_id, None)

    def _get(self, sub_game_id: str) -> SubGameState:
        game = self._games.get(sub_game_id)
        if game is None:
            raise SubGameNotFound(f"Sub-game {sub_game_id} not found")
        return game
