"""
Tests for the in-memory Board Service.
"""

import asyncio

import pytest

from ..board_service import (
    InMemoryBoardService,
    InvalidMove,
    SubGameNotFound,
    SubGameStatus,
)
from ..engine_core import Outcome, Player


def play_all(service, sub_game_id, moves):
    """Play (cell, player) pairs in order and return the last state."""
    async def run():
        state = None
        for cell, player in moves:
            state = await service.play_move(sub_game_id, cell, player)
        return state
    return asyncio.run(run())


@pytest.fixture
def sub_game(board_service):
    return asyncio.run(board_service.create_sub_game())


class TestCreateAndQuery:

    def test_new_sub_game_is_empty(self, sub_game):
        assert sub_game.board == [None] * 9
        assert sub_game.status == SubGameStatus.IN_PROGRESS
        assert sub_game.outcome is None

    def test_ids_are_unique(self, board_service):
        first = asyncio.run(board_service.create_sub_game())
        second = asyncio.run(board_service.create_sub_game())
        assert first.id != second.id

    def test_get_returns_current_state(self, board_service, sub_game):
        play_all(board_service, sub_game.id, [(4, Player.X)])
        state = asyncio.run(board_service.get_sub_game(sub_game.id))
        assert state.board[4] == Player.X

    def test_unknown_id(self, board_service):
        with pytest.raises(SubGameNotFound):
            asyncio.run(board_service.get_sub_game("missing"))

    def test_returned_state_is_a_copy(self, board_service, sub_game):
        sub_game.board[0] = Player.O
        state = asyncio.run(board_service.get_sub_game(sub_game.id))
        assert state.board[0] is None

    def test_discard(self, board_service, sub_game):
        board_service.discard(sub_game.id)
        with pytest.raises(SubGameNotFound):
            asyncio.run(board_service.get_sub_game(sub_game.id))


class TestPlayMove:

    def test_row_win(self, board_service, sub_game):
        state = play_all(board_service, sub_game.id, [
            (0, Player.X), (3, Player.O), (1, Player.X), (4, Player.O), (2, Player.X),
        ])
        assert state.winner == Player.X
        assert state.outcome == Outcome.X
        assert state.status == SubGameStatus.WON

    def test_same_player_may_play_twice(self, board_service, sub_game):
        """Sub-game turn order is decided by the meta game."""
        state = play_all(board_service, sub_game.id, [
            (0, Player.O), (4, Player.O), (8, Player.O),
        ])
        assert state.outcome == Outcome.O

    def test_draw(self, board_service, sub_game):
        state = play_all(board_service, sub_game.id, [
            (0, Player.X), (1, Player.O), (2, Player.X),
            (4, Player.O), (3, Player.X), (5, Player.O),
            (7, Player.X), (6, Player.O), (8, Player.X),
        ])
        assert state.is_draw
        assert state.winner is None
        assert state.outcome == Outcome.DRAW

    def test_occupied_cell(self, board_service, sub_game):
        play_all(board_service, sub_game.id, [(4, Player.X)])
        with pytest.raises(InvalidMove, match="occupied"):
            play_all(board_service, sub_game.id, [(4, Player.O)])

    def test_finished_game(self, board_service, sub_game):
        play_all(board_service, sub_game.id, [(0, Player.X), (1, Player.X), (2, Player.X)])
        with pytest.raises(InvalidMove, match="finished"):
            play_all(board_service, sub_game.id, [(5, Player.O)])

    @pytest.mark.parametrize("cell", [-1, 9, "4"])
    def test_bad_cell(self, board_service, sub_game, cell):
        with pytest.raises(InvalidMove):
            play_all(board_service, sub_game.id, [(cell, Player.X)])

    def test_bad_player(self, board_service, sub_game):
        with pytest.raises(InvalidMove):
            play_all(board_service, sub_game.id, [(0, "Z")])

    def test_player_string_accepted(self, board_service, sub_game):
        state = play_all(board_service, sub_game.id, [(0, "O")])
        assert state.board[0] == Player.O

    def test_to_dict(self, board_service, sub_game):
        state = play_all(board_service, sub_game.id, [(0, Player.X)])
        data = state.to_dict()
        assert data["board"][0] == "X"
        assert data["status"] == "in_progress"
        assert data["winner"] is None
        assert data["is_draw"] is False
