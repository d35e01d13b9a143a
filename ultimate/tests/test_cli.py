"""
Tests for the command-line interface.
"""

import asyncio

import pytest

from ..cli import main, render
from ..engine_core import Outcome


class TestRender:

    def test_fresh_game(self, started_session):
        session, _ = started_session
        text = render(session.snapshot())

        assert "Meta board: . . . . . . . . ." in text
        assert "Current player: X (any board)" in text
        assert text.count("*") == 27

    def test_required_board_marked(self, started_session):
        session, loop = started_session
        asyncio.run(loop.play(0, 4))

        text = render(session.snapshot())
        middle_row = text.splitlines()[1]

        assert "Current player: O (board 4)" in text
        assert middle_row.startswith(" . X .")
        assert text.count("*") == 3

    def test_meta_winner(self, started_session):
        session, _ = started_session
        for index in (0, 4, 8):
            session.machine.on_outcome(index, Outcome.O)

        text = render(session.snapshot())

        assert "Meta winner: O" in text
        assert "Current player" not in text

    def test_errored_board(self, started_session):
        session, _ = started_session
        session.boards[1].error = "Create failed: 503"

        assert "! ! !" in render(session.snapshot())


class TestMain:

    def test_no_command_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_play_session(self, monkeypatch, capsys):
        inputs = iter(["4 2", "x y", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

        main(["play"])
        out = capsys.readouterr().out

        assert "Current player: O (board 2)" in out
        assert "Board and cell must be numbers 0-8." in out

    def test_play_reports_ignored_move(self, monkeypatch, capsys):
        inputs = iter(["4 2", "0 0"])

        # End of input leaves the game
        def read(prompt=""):
            try:
                return next(inputs)
            except StopIteration:
                raise EOFError
        monkeypatch.setattr("builtins.input", read)

        main(["play"])

        assert "Not played:" in capsys.readouterr().out
