"""
Session Controller

Top-level wiring between the host player and the shuffle core: reacts to
track changes, exposes the on/off toggle and the single skip/back entry
points, and samples playback progress for end-of-track detection.
"""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import suppress
from typing import Coroutine

from models.config import ShuffleConfig
from models.session import SessionState
from services.history_tracker import HistoryTracker
from services.player_protocol import TRACK_CHANGED, MediaPlayer, PlayerError
from services.playlist_cache import PlaylistCache, is_playlist_context
from services.scheduler import DeferredScheduler
from services.skip_coordinator import SkipCoordinator

logger = logging.getLogger(__name__)


class SessionController:
    """Owns one shuffle session over a host player."""

    def __init__(
        self,
        player: MediaPlayer,
        config: ShuffleConfig | None = None,
        rng: random.Random | None = None,
        scheduler: DeferredScheduler | None = None,
    ):
        self.config = config or ShuffleConfig()
        self.state = SessionState()
        self.history = HistoryTracker(self.config.history_size)
        self.cache = PlaylistCache(player, self.config.playlist_prefix)
        self.scheduler = scheduler or DeferredScheduler()
        self.coordinator = SkipCoordinator(
            player,
            self.state,
            self.history,
            self.cache,
            self.scheduler,
            self.config,
            rng,
        )
        self._player = player
        self._tasks: set[asyncio.Task] = set()
        self._sampler: asyncio.Task | None = None

    @property
    def is_active(self) -> bool:
        return self.state.active

    def status_text(self) -> str:
        return f"True Shuffle: {'ON' if self.state.active else 'OFF'}"

    async def start(self, sample_progress: bool = True) -> None:
        """Subscribe to player events and start sampling progress."""
        self._player.subscribe(TRACK_CHANGED, self.on_track_changed)
        if sample_progress:
            self._sampler = asyncio.create_task(self._sample_loop())
        logger.info("Session controller started")

    async def shutdown(self) -> None:
        """Unsubscribe, cancel pending work and leave the volume restored."""
        self._player.unsubscribe(TRACK_CHANGED, self.on_track_changed)
        self.scheduler.invalidate()

        tasks = list(self._tasks)
        if self._sampler is not None:
            tasks.append(self._sampler)
            self._sampler = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task

        self.coordinator.restore_volume()
        logger.info("Session controller stopped")

    def toggle(self) -> bool:
        """Flip the user toggle.

        Returns:
            The new active state.
        """
        self.state.active = not self.state.active
        if not self.state.active:
            self.state.cancel_pass_through()
            self.coordinator.restore_volume()
        logger.info(self.status_text())
        return self.state.active

    def in_true_shuffle_mode(self) -> bool:
        return (
            self.state.active
            and self._player.get_shuffle_enabled()
            and is_playlist_context(self._player.get_current_context_uri(), self.config.playlist_prefix)
        )

    def skip_forward(self) -> None:
        """Entry point for every forward skip request."""
        if not self.in_true_shuffle_mode():
            self._player.skip_to_next()
            return
        if self.state.handling:
            logger.debug("Skip forward ignored while handling")
            return
        self.coordinator.mute()
        self._spawn(self.coordinator.handle_skip_forward())

    def skip_back(self) -> None:
        """Entry point for every back skip request."""
        if not self.in_true_shuffle_mode():
            self._player.skip_to_previous()
            return
        if self.state.handling:
            logger.debug("Skip back ignored while handling")
            return
        self._spawn(self.coordinator.handle_skip_back())

    def on_track_changed(self) -> None:
        """Handle the player's track-changed notification."""
        if self.state.handling:
            return

        track = self._player.get_current_track()
        uri = track.uri if track else None
        context_uri = self._player.get_current_context_uri()

        if self.state.native_pending:
            self.coordinator.validate_native_pick(track)
            return

        if uri and uri == self.state.played_by_us_uri:
            self.state.played_by_us_uri = None
            return

        if context_uri != self.state.last_context_uri:
            self._reset_context(context_uri, uri)
            return

        if not self.in_true_shuffle_mode():
            return

        if self._was_near_end():
            logger.debug("Track ended naturally, picking next")
            self._spawn(self.coordinator.handle_skip_forward())
        # Otherwise a skip we did not intercept: leave the native pick alone

    def sample_progress(self) -> None:
        try:
            self.state.progress = self._player.get_progress() or 0.0
            self.state.duration = self._player.get_duration() or 0.0
        except PlayerError as e:
            logger.debug(f"Progress sample failed: {e}")

    def _was_near_end(self) -> bool:
        duration = self.state.duration
        return duration > 0 and (duration - self.state.progress) < self.config.end_window

    def _reset_context(self, context_uri: str | None, uri: str | None) -> None:
        logger.info(f"Context changed to {context_uri}")
        self.scheduler.invalidate()
        self.coordinator.restore_volume()
        self.state.reset_context(context_uri)
        self.history.reset()
        self.cache.clear(context_uri)

        if uri:
            self.history.push_navigation(uri)

        if is_playlist_context(context_uri, self.config.playlist_prefix):
            self._spawn(self.cache.preload(context_uri))

    async def _sample_loop(self) -> None:
        while True:
            self.sample_progress()
            await asyncio.sleep(self.config.progress_interval)

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Shuffle task failed: {type(exc).__name__}: {exc}", exc_info=exc)
