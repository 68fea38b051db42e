# Area: Session Tests
"""Tests for GameSessionStore."""

from unittest.mock import Mock, patch

import pytest

from fhe_quest._session.game_store import GameSessionStore
from fhe_quest.types import GameSession, PlayerStats

MOCK_TIME = "fhe_quest._session.game_store.time"
PLAYER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def make_game(game_id=1, start_time=1000, duration=3600, **overrides):
    values = dict(
        id=game_id, creator="0xcreator", treasure_amount=10 ** 18,
        duration_seconds=duration, start_time=start_time, is_active=True,
        is_completed=False, winner=None, total_attempts=0, total_revenue=0,
    )
    values.update(overrides)
    return GameSession(**values)


def make_ledger(game=None, wrong=0, fee=10 ** 15, owner="0xother"):
    ledger = Mock()
    ledger.get_game_stats.return_value = game or make_game()
    ledger.get_player_stats.return_value = PlayerStats(wrong_attempts=wrong)
    ledger.get_attempt_fee.return_value = fee
    ledger.owner.return_value = owner
    return ledger


class TestRefresh:
    """Tests for GameSessionStore.refresh()."""

    def test_refresh_populates_fields(self):
        ledger = make_ledger(wrong=2)
        store = GameSessionStore(ledger, PLAYER)
        with patch(MOCK_TIME) as mock_time:
            mock_time.time.return_value = 1600.0
            mock_time.monotonic.return_value = 50.0
            store.refresh()

        assert store.game.id == 1
        assert store.attempt_fee == 10 ** 15
        assert store.is_active is True
        assert store.remaining_seconds == 3000
        assert store.displayed_wrong_attempts == 2
        ledger.get_player_stats.assert_called_once_with(PLAYER)

    def test_creator_detected_case_insensitively(self):
        ledger = make_ledger(owner=PLAYER.lower())
        store = GameSessionStore(ledger, PLAYER)
        store.refresh()
        assert store.is_creator is True

    def test_completed_game_is_inactive(self):
        ledger = make_ledger(game=make_game(is_completed=True))
        store = GameSessionStore(ledger, PLAYER)
        store.refresh()
        assert store.is_active is False
        assert store.remaining_seconds == 0

    def test_new_game_listener_called_on_id_change(self):
        ledger = make_ledger()
        store = GameSessionStore(ledger, PLAYER)
        listener = Mock()
        store.on_new_game(listener)

        store.refresh()
        listener.assert_not_called()

        new_game = make_game(game_id=2)
        ledger.get_game_stats.return_value = new_game
        store.refresh()
        listener.assert_called_once_with(new_game)

    def test_same_game_does_not_notify(self):
        ledger = make_ledger()
        store = GameSessionStore(ledger, PLAYER)
        listener = Mock()
        store.on_new_game(listener)
        store.refresh()
        store.refresh()
        listener.assert_not_called()

    def test_ledger_errors_propagate(self):
        ledger = make_ledger()
        ledger.get_game_stats.side_effect = RuntimeError("rpc down")
        store = GameSessionStore(ledger, PLAYER)
        with pytest.raises(RuntimeError):
            store.refresh()
        assert store.needs_refresh() is True


class TestCountdown:
    """Tests for the local countdown."""

    def test_tick_recomputes_remaining(self):
        store = GameSessionStore(make_ledger(), PLAYER)
        with patch(MOCK_TIME) as mock_time:
            mock_time.time.return_value = 1000.0
            mock_time.monotonic.return_value = 0.0
            store.refresh()
            assert store.remaining_seconds == 3600

            mock_time.time.return_value = 4599.0
            assert store.tick() == 1

    def test_expiry_marks_inactive_without_ledger(self):
        ledger = make_ledger()
        store = GameSessionStore(ledger, PLAYER)
        with patch(MOCK_TIME) as mock_time:
            mock_time.time.return_value = 1000.0
            mock_time.monotonic.return_value = 0.0
            store.refresh()

            mock_time.time.return_value = 4700.0
            assert store.tick() == 0
        assert store.is_active is False
        assert ledger.get_game_stats.call_count == 1


class TestRefreshScheduling:
    """Tests for needs_refresh() and request_refresh()."""

    def test_needs_refresh_before_first_refresh(self):
        store = GameSessionStore(make_ledger(), PLAYER)
        assert store.needs_refresh() is True

    def test_interval_elapsed(self):
        store = GameSessionStore(make_ledger(), PLAYER, refresh_interval=10.0)
        with patch(MOCK_TIME) as mock_time:
            mock_time.time.return_value = 1000.0
            mock_time.monotonic.return_value = 100.0
            store.refresh()

            mock_time.monotonic.return_value = 109.0
            assert store.needs_refresh() is False
            mock_time.monotonic.return_value = 110.0
            assert store.needs_refresh() is True

    def test_request_refresh(self):
        store = GameSessionStore(make_ledger(), PLAYER)
        store.refresh()
        assert store.needs_refresh() is False
        store.request_refresh()
        assert store.needs_refresh() is True


class TestOptimisticUpdates:
    """Tests for updates applied ahead of the next refresh."""

    def test_note_wrong_attempt(self):
        store = GameSessionStore(make_ledger(wrong=1), PLAYER)
        store.refresh()
        store.note_wrong_attempt()
        assert store.displayed_wrong_attempts == 2

    def test_refresh_resyncs_wrong_attempts(self):
        ledger = make_ledger(wrong=1)
        store = GameSessionStore(ledger, PLAYER)
        store.refresh()
        store.note_wrong_attempt()
        ledger.get_player_stats.return_value = PlayerStats(wrong_attempts=2)
        store.refresh()
        assert store.displayed_wrong_attempts == 2

    def test_mark_inactive(self):
        store = GameSessionStore(make_ledger(), PLAYER)
        store.refresh()
        store.mark_inactive()
        assert store.is_active is False
        assert store.remaining_seconds == 0
