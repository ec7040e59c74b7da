"""
Skip Coordinator

Decides, for every forward/back request, whether to replay navigation
history, pass the skip through to the native player, or make a weighted
pick. Owns the re-entrancy guard and the mute/restore choreography around
track transitions.
"""

from __future__ import annotations

import logging
import random

from models.config import ShuffleConfig
from models.session import SessionState
from models.track import Track
from services.history_tracker import HistoryTracker
from services.player_protocol import MediaPlayer, PlayerError
from services.playlist_cache import PlaylistCache
from services.scheduler import DeferredScheduler
from services.weighted_selector import excluded_uris, pick_next_track

logger = logging.getLogger(__name__)


class SkipCoordinator:
    """State machine behind skip forward/back requests.

    Idle until a request takes the guard in SessionState; the guard is
    released settle_delay seconds after the request completes so that the
    track change it caused is absorbed. Requests arriving meanwhile are
    dropped, not queued.
    """

    def __init__(
        self,
        player: MediaPlayer,
        state: SessionState,
        history: HistoryTracker,
        cache: PlaylistCache,
        scheduler: DeferredScheduler,
        config: ShuffleConfig,
        rng: random.Random | None = None,
    ):
        self._player = player
        self._state = state
        self._history = history
        self._cache = cache
        self._scheduler = scheduler
        self._config = config
        self._rng = rng or random.Random()

    def mute(self) -> None:
        """Silence output for a transition, remembering the volume once."""
        if not self._state.muted:
            self._state.saved_volume = self._player.get_volume()
            self._state.muted = True
        self._player.set_volume(0)

    def restore_volume(self) -> None:
        if self._state.muted and self._state.saved_volume is not None:
            self._player.set_volume(self._state.saved_volume)
        self._state.muted = False
        self._state.saved_volume = None

    def _release_later(self, token: int) -> None:
        self._scheduler.call_later(self._config.settle_delay, self._state.release_guard, token)

    async def _play(self, context_uri: str, track_uri: str) -> bool:
        """Ask the player to start a track in the context.

        Returns:
            True if the player accepted the command.
        """
        self._state.played_by_us_uri = track_uri
        try:
            await self._player.play_track_in_context(context_uri, track_uri)
        except PlayerError as e:
            self._state.played_by_us_uri = None
            logger.warning(f"Failed to play {track_uri}: {e}")
            return False
        return True

    def _pass_through(self) -> None:
        """Hand the next skip to the native player, muted."""
        pass_through_id = self._state.begin_pass_through()
        self.mute()
        self._scheduler.call_later(self._config.native_skip_delay, self._native_skip, pass_through_id)

    def _native_skip(self, pass_through_id: int) -> None:
        if not self._state.is_current_pass_through(pass_through_id):
            logger.debug(f"Dropping superseded native skip {pass_through_id}")
            return
        self._player.skip_to_next()

    async def _weighted_pick(self, context_uri: str) -> None:
        for attempt in range(1, self._config.max_play_attempts + 1):
            track = pick_next_track(
                self._cache.tracks,
                self._history.play_history,
                self._config,
                self._rng,
            )
            if track is None:
                return

            if await self._play(context_uri, track.uri):
                self._history.push_navigation(track.uri)
                logger.debug(f"True shuffle pick: {track.name} - {track.artist_name}")
                return

            # Bias the next pick away from the track that failed to start
            self._history.record_failed_attempt(track)

        logger.warning(f"Giving up skip after {self._config.max_play_attempts} failed attempts")

    async def handle_skip_forward(self) -> None:
        """
        Advance to the next track.

        Replays forward navigation history when the cursor is behind the
        tail; otherwise counts the skip and either passes it through to the
        native player or makes a weighted pick.
        """
        token = self._state.acquire_guard()
        if token is None:
            logger.debug("Skip forward dropped, request already in flight")
            return

        if self._state.native_pending:
            # This request supersedes a pass-through whose native skip has not landed
            self._state.cancel_pass_through()

        stay_muted = False
        try:
            context_uri = self._player.get_current_context_uri()
            if not await self._cache.ensure_loaded(context_uri):
                logger.debug(f"No tracks available for {context_uri}, ignoring skip")
                return

            current = self._player.get_current_track()
            if current is not None:
                self._history.record_play(current)

            if not self._history.at_navigation_tail:
                next_uri = self._history.step_forward()
                if await self._play(context_uri, next_uri):
                    logger.debug(f"Replaying forward history at {self._history.navigation_index}")
                    return
                self._history.rollback_forward()

            self._state.skip_counter += 1
            if self._state.skip_counter % self._config.true_shuffle_every != 0:
                logger.debug(f"Skip {self._state.skip_counter}: native pass-through")
                self._state.native_retries = 0
                # Release early so the native track change is not blocked
                self._state.release_guard(token)
                self._pass_through()
                stay_muted = True
                return

            logger.debug(f"Skip {self._state.skip_counter}: weighted pick")
            await self._weighted_pick(context_uri)
        finally:
            if not stay_muted:
                self.restore_volume()
            self._release_later(token)

    async def handle_skip_back(self) -> None:
        """Step back through navigation history, or restart the current track."""
        token = self._state.acquire_guard()
        if token is None:
            logger.debug("Skip back dropped, request already in flight")
            return

        if self._state.native_pending:
            self._state.cancel_pass_through()

        try:
            previous_uri = self._history.step_back()
            if previous_uri is None:
                self._player.seek(0)
                return

            context_uri = self._player.get_current_context_uri()
            if not context_uri or not await self._play(context_uri, previous_uri):
                self._history.step_forward()
        finally:
            self.restore_volume()
            self._release_later(token)

    def validate_native_pick(self, track: Track | None) -> None:
        """
        Accept or reject the track the native player just started.

        A track inside the no-repeat window triggers another pass-through
        without unmuting, up to max_native_retries times; after that the
        pick is accepted as is.

        Args:
            track: Track now playing, if the player reports one
        """
        self._state.native_pending = False

        if track is None:
            self.restore_volume()
            return

        recent = excluded_uris(self._history.play_history, self._config.no_repeat_window)
        if track.uri in recent:
            if self._state.native_retries < self._config.max_native_retries:
                self._state.native_retries += 1
                logger.debug(f"Native pick {track.uri} repeats recent play, skipping again")
                self._pass_through()
                return
            logger.info(f"Accepting repeated native pick after {self._state.native_retries} retries")

        self._state.native_retries = 0
        self._history.push_navigation(track.uri)
        self._history.record_play(track)
        self.restore_volume()
