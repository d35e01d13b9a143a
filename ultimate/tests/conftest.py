"""
Pytest fixtures for Ultimate tests.
"""

import asyncio

import pytest

from ..board_service import InMemoryBoardService, BoardServiceError
from ..engine_core import MetaGameStateMachine, MetaState, Outcome
from ..session import SessionManager


class FlakyBoardService(InMemoryBoardService):
    """Fails the next N calls of each kind on request."""

    def __init__(self):
        super().__init__()
        self.fail_creates = 0
        self.fail_moves = 0
        self.fail_queries = 0

    async def create_sub_game(self):
        if self.fail_creates:
            self.fail_creates -= 1
            raise BoardServiceError("Create failed: 503")
        return await super().create_sub_game()

    async def play_move(self, sub_game_id, cell_index, player):
        if self.fail_moves:
            self.fail_moves -= 1
            raise BoardServiceError("Move failed: 503")
        return await super().play_move(sub_game_id, cell_index, player)

    async def get_sub_game(self, sub_game_id):
        if self.fail_queries:
            self.fail_queries -= 1
            raise BoardServiceError("Query failed: 503")
        return await super().get_sub_game(sub_game_id)


class GatedBoardService(InMemoryBoardService):
    """Holds play_move responses until `gate` is set."""

    def __init__(self):
        super().__init__()
        self.gate: asyncio.Event | None = None

    async def play_move(self, sub_game_id, cell_index, player):
        if self.gate is not None:
            await self.gate.wait()
        return await super().play_move(sub_game_id, cell_index, player)


def state_with_outcomes(outcomes, **kwargs) -> MetaState:
    """Build a MetaState from strings: 'X', 'O', 'draw' or None."""
    return MetaState(
        outcomes=[Outcome(o) if o else None for o in outcomes],
        **kwargs,
    )


@pytest.fixture
def machine() -> MetaGameStateMachine:
    """Fresh machine that raises on contract violations."""
    return MetaGameStateMachine(strict=True)


@pytest.fixture
def lenient_machine() -> MetaGameStateMachine:
    """Fresh machine in production mode."""
    return MetaGameStateMachine(strict=False)


@pytest.fixture
def board_service() -> InMemoryBoardService:
    return InMemoryBoardService()


@pytest.fixture
def flaky_service() -> FlakyBoardService:
    return FlakyBoardService()


@pytest.fixture
def manager(board_service) -> SessionManager:
    return SessionManager(service=board_service, strict=True)


@pytest.fixture
def started_session(manager):
    """A session whose nine sub-games have been created."""
    session = manager.create_session()
    loop = manager.get_loop(session.session_id)
    asyncio.run(loop.start())
    return session, loop
