"""Tests for configuration, session state and the deferred scheduler."""

import asyncio
import logging

from models.config import ShuffleConfig
from models.session import SessionState
from services.scheduler import DeferredScheduler


class TestShuffleConfig:

    def test_defaults_are_valid(self):
        config = ShuffleConfig()
        assert config.is_valid()
        assert config.history_size == 500
        assert config.no_repeat_window == 100
        assert config.true_shuffle_every == 3

    def test_from_env_parses_values(self):
        config = ShuffleConfig.from_env({
            "TRUE_SHUFFLE_NO_REPEAT_WINDOW": "20",
            "TRUE_SHUFFLE_ARTIST_PENALTY": "0.5",
            "TRUE_SHUFFLE_PLAYLIST_PREFIX": "playlist:",
        })

        assert config.no_repeat_window == 20
        assert config.artist_penalty == 0.5
        assert config.playlist_prefix == "playlist:"

    def test_from_env_ignores_malformed_value(self, caplog):
        with caplog.at_level(logging.WARNING, logger="models.config"):
            config = ShuffleConfig.from_env({"TRUE_SHUFFLE_HISTORY_SIZE": "lots"})

        assert config.history_size == 500
        assert "TRUE_SHUFFLE_HISTORY_SIZE" in caplog.text

    def test_from_env_falls_back_on_invalid_combination(self):
        config = ShuffleConfig.from_env({"TRUE_SHUFFLE_TRUE_SHUFFLE_EVERY": "0"})
        assert config.true_shuffle_every == 3

    def test_validate_reports_error(self):
        valid, error = ShuffleConfig(min_weight=0).validate()
        assert not valid
        assert "min_weight" in error


class TestSessionState:

    def test_guard_rejects_second_acquire(self):
        state = SessionState()
        token = state.acquire_guard()

        assert token is not None
        assert state.acquire_guard() is None

    def test_stale_release_does_not_free_newer_guard(self):
        state = SessionState()
        first = state.acquire_guard()
        assert state.release_guard(first)

        second = state.acquire_guard()

        assert not state.release_guard(first)
        assert state.handling
        assert state.release_guard(second)

    def test_reset_context_keeps_toggle(self):
        state = SessionState(active=False, skip_counter=4, native_pending=True, handling=True)

        state.reset_context("spotify:playlist:x")

        assert state.active is False
        assert state.skip_counter == 0
        assert not state.native_pending
        assert not state.handling
        assert state.last_context_uri == "spotify:playlist:x"


class TestDeferredScheduler:

    def test_callback_fires_after_delay(self):
        fired = []

        async def run():
            scheduler = DeferredScheduler()
            scheduler.call_later(0.01, fired.append, "done")
            assert scheduler.pending() == 1
            await asyncio.sleep(0.05)
            assert scheduler.pending() == 0

        asyncio.run(run())

        assert fired == ["done"]

    def test_invalidate_drops_pending_callbacks(self):
        fired = []

        async def run():
            scheduler = DeferredScheduler()
            scheduler.call_later(0.01, fired.append, "stale")
            scheduler.invalidate()
            scheduler.call_later(0.01, fired.append, "fresh")
            await asyncio.sleep(0.05)

        asyncio.run(run())

        assert fired == ["fresh"]
