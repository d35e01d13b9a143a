"""
Tests for MetaGameStateMachine.

Covers the public operations and the contract-violation modes.
"""

import logging
import random

import pytest

from ..engine_core import MetaGameStateMachine, ContractViolation, Outcome, Player


class TestOperations:
    """Tests for on_move / on_outcome / reset / queries."""

    def test_initial_state(self, machine):
        state = machine.state
        assert state.outcomes == [None] * 9
        assert state.active_player == Player.X
        assert state.required_board is None
        assert machine.generation == 0
        assert machine.meta_outcome() is None

    def test_send_rule(self, machine):
        machine.on_move(2, 5)
        assert machine.state.required_board == 5

    def test_send_rule_to_finished_board(self, machine):
        machine.on_outcome(5, Outcome.O)
        machine.on_move(2, 5)
        assert machine.state.required_board is None

    def test_circular_constraint(self, machine):
        """Required board 4 finishing clears the requirement."""
        machine.on_move(0, 4)
        assert machine.state.required_board == 4

        machine.on_outcome(4, Outcome.X)
        assert machine.state.required_board is None

    def test_ignored_move_keeps_player(self, machine):
        machine.on_move(0, 4)
        result = machine.on_move(3, 0)

        assert not result.accepted
        assert machine.state.active_player == Player.O
        assert machine.state.required_board == 4

    def test_is_board_active(self, machine):
        machine.on_move(0, 4)
        assert machine.is_board_active(4)
        assert not machine.is_board_active(0)
        assert machine.active_boards() == [4]

    def test_end_to_end_meta_win(self, machine):
        for index, outcome in [(0, "X"), (1, "O"), (3, "X"), (5, "O")]:
            machine.on_outcome(index, Outcome(outcome))
        assert machine.meta_outcome() is None

        machine.on_outcome(6, Outcome.X)
        assert machine.meta_outcome() == Outcome.X

    def test_draw(self, machine):
        for index, outcome in enumerate(["X", "O", "X", "X", "O", "O", "O", "X", "draw"]):
            machine.on_outcome(index, Outcome(outcome))
        assert machine.meta_outcome() == Outcome.DRAW

    def test_terminal_state_ignores_moves(self, machine):
        machine.on_move(1, 2)
        for index in (0, 4, 8):
            machine.on_outcome(index, Outcome.O)
        before = machine.snapshot()

        for board in range(9):
            result = machine.on_move(board, 3)
            assert not result.accepted

        assert machine.snapshot() == before

    def test_reset(self, machine):
        machine.on_move(4, 4)
        machine.on_outcome(4, Outcome.X)
        machine.on_outcome(0, Outcome.O)

        machine.reset()
        state = machine.state
        assert state.outcomes == [None] * 9
        assert state.required_board is None
        assert state.active_player == Player.X
        assert machine.generation == 1

    def test_generation_strictly_increases(self, machine):
        generations = []
        for _ in range(3):
            machine.reset()
            generations.append(machine.generation)
        assert generations == [1, 2, 3]

    def test_player_alternates_once_per_accepted_move(self, machine):
        """Random event streams: the player flips exactly on accepted moves."""
        rng = random.Random(7)
        for _ in range(300):
            before = machine.state.active_player
            if rng.random() < 0.2:
                board = rng.randrange(9)
                if machine.state.outcomes[board] is None:
                    machine.on_outcome(board, rng.choice(list(Outcome)))
                assert machine.state.active_player == before
                continue

            result = machine.on_move(rng.randrange(9), rng.randrange(9))
            if result.accepted:
                assert machine.state.active_player == before.opponent
            else:
                assert machine.state.active_player == before

            required = machine.state.required_board
            if required is not None:
                assert machine.state.outcomes[required] is None

            if machine.meta_outcome() is not None:
                machine.reset()


class TestContractViolations:
    """Strict mode raises, production mode logs and ignores."""

    def test_strict_out_of_range_raises(self, machine):
        with pytest.raises(ContractViolation):
            machine.on_move(9, 0)

    def test_strict_outcome_regression_raises(self, machine):
        machine.on_outcome(3, Outcome.X)
        with pytest.raises(ContractViolation) as exc_info:
            machine.on_outcome(3, Outcome.O)
        assert exc_info.value.event.board_index == 3

    def test_strict_same_outcome_is_fine(self, machine):
        machine.on_outcome(3, Outcome.X)
        result = machine.on_outcome(3, Outcome.X)
        assert not result.accepted
        assert machine.state.outcomes[3] == Outcome.X

    def test_strict_is_board_active_bad_index_raises(self, machine):
        with pytest.raises(ContractViolation):
            machine.is_board_active(12)

    def test_lenient_out_of_range_is_noop(self, lenient_machine, caplog):
        with caplog.at_level(logging.WARNING):
            result = lenient_machine.on_move(0, 42)

        assert not result.accepted
        assert lenient_machine.state.active_player == Player.X
        assert "Contract violation" in caplog.text

    def test_lenient_outcome_regression_keeps_first(self, lenient_machine):
        lenient_machine.on_outcome(3, Outcome.X)
        lenient_machine.on_outcome(3, Outcome.O)
        assert lenient_machine.state.outcomes[3] == Outcome.X

    def test_lenient_is_board_active_bad_index(self, lenient_machine):
        assert lenient_machine.is_board_active(-1) is False

    def test_strict_follows_environment(self, monkeypatch):
        monkeypatch.setenv("ULTIMATE_ENV", "production")
        assert MetaGameStateMachine().strict is False

        monkeypatch.setenv("ULTIMATE_ENV", "development")
        assert MetaGameStateMachine().strict is True
