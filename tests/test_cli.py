# Area: Shared Tests
"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

import pytest

from fhe_quest.cli import format_status, main, parse_args
from fhe_quest.errors import NetworkMismatch
from fhe_quest.types import GameSession

PLAYER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def make_runner(session=None, **store_values):
    runner = MagicMock()
    store = runner.game.store
    store.game = session
    store.is_active = store_values.get("is_active", True)
    store.remaining_seconds = store_values.get("remaining_seconds", 3661)
    store.attempt_fee = 10 ** 15
    store.displayed_wrong_attempts = 2
    store.is_creator = store_values.get("is_creator", False)
    runner.game.session.account = PLAYER
    return runner


def make_game():
    return GameSession(
        id=5, creator="0xc", treasure_amount=10 ** 18, duration_seconds=3600,
        start_time=0, is_active=True, is_completed=False, winner=None,
        total_attempts=4, total_revenue=4 * 10 ** 15,
    )


class TestParseArgs:
    """Tests for argument parsing."""

    def test_status_command(self):
        args = parse_args(["status", "--config", "c.json"])
        assert args.command == "status"
        assert args.config == "c.json"

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            parse_args(["search"])


class TestFormatStatus:
    """Tests for format_status()."""

    def test_active_game(self):
        text = format_status(make_runner(make_game()))
        assert "Game #5" in text
        assert "ACTIVE" in text
        assert "01:01:01" in text
        assert "0.001 ETH" in text
        assert "0x7099...79C8" in text

    def test_creator_flag(self):
        text = format_status(make_runner(make_game(), is_creator=True))
        assert "You are the game creator." in text

    def test_unknown_game(self):
        assert "unknown" in format_status(make_runner(None))


class TestMain:
    """Tests for main()."""

    def test_invalid_config_returns_error(self, capsys):
        with patch("fhe_quest.cli.load_config", side_effect=ValueError("Invalid config")):
            assert main(["status"]) == 1
        assert "Invalid config" in capsys.readouterr().err

    def test_status_prints_and_succeeds(self, capsys):
        runner = make_runner(make_game())
        with patch("fhe_quest.cli.load_config"), \
                patch("fhe_quest.cli.QuestRunner", return_value=runner):
            assert main(["status"]) == 0
        runner.connect.assert_called_once()
        runner.run.assert_not_called()
        assert "Game #5" in capsys.readouterr().out

    def test_watch_runs_loop(self):
        runner = make_runner(make_game())
        with patch("fhe_quest.cli.load_config"), \
                patch("fhe_quest.cli.QuestRunner", return_value=runner):
            assert main(["watch"]) == 0
        runner.run.assert_called_once()

    def test_classified_error_returns_error(self, capsys):
        runner = make_runner(make_game())
        runner.connect.side_effect = NetworkMismatch(1, 11155111)
        with patch("fhe_quest.cli.load_config"), \
                patch("fhe_quest.cli.QuestRunner", return_value=runner):
            assert main(["status"]) == 1
        assert "NETWORK_MISMATCH" in capsys.readouterr().err
