"""
Local Player

Host media player over local files: playlists come from MusicLibrary,
audio goes through AudioPlayer. Implements the MediaPlayer protocol the
shuffle controller drives, including a plain native shuffle.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import defaultdict
from typing import Callable

from models.track import PlaylistItem, Track
from services.audio_player import AudioPlayer
from services.music_library import MusicLibrary
from services.player_protocol import TRACK_CHANGED, PlayerError

logger = logging.getLogger(__name__)


class LocalPlayer:
    """MediaPlayer implementation for the terminal app."""

    def __init__(
        self,
        library: MusicLibrary,
        audio_player: AudioPlayer,
        rng: random.Random | None = None,
    ):
        self._library = library
        self._audio = audio_player
        self._rng = rng or random.Random()
        self._subscribers: dict[str, list[Callable[[], None]]] = defaultdict(list)
        self._context_uri: str | None = None
        self._items: list[PlaylistItem] = []
        self._current_index: int = -1
        self._shuffle = True

    def get_shuffle_enabled(self) -> bool:
        return self._shuffle

    def set_shuffle_enabled(self, enabled: bool) -> None:
        self._shuffle = enabled

    def get_current_context_uri(self) -> str | None:
        return self._context_uri

    def get_current_track(self) -> Track | None:
        if 0 <= self._current_index < len(self._items):
            return self._items[self._current_index].to_track()
        return None

    async def load_playlist_contents(self, context_uri: str) -> list[PlaylistItem]:
        try:
            return await asyncio.to_thread(self._library.load_playlist, context_uri)
        except KeyError:
            raise PlayerError(f"Unknown playlist: {context_uri}")
        except OSError as e:
            raise PlayerError(f"Cannot read playlist {context_uri}: {e}")

    async def play_context(self, context_uri: str) -> None:
        """Start a playlist from its first track, or a random one when shuffling."""
        items = await self.load_playlist_contents(context_uri)
        playable = [i for i, item in enumerate(items) if item.is_playable]
        if not playable:
            raise PlayerError(f"No playable tracks in {context_uri}")

        index = self._rng.choice(playable) if self._shuffle else playable[0]
        self._start(context_uri, items, index)

    async def play_track_in_context(self, context_uri: str, track_uri: str) -> None:
        items = await self.load_playlist_contents(context_uri)
        for index, item in enumerate(items):
            if item.uri == track_uri:
                if not item.is_playable:
                    raise PlayerError(f"Track is not playable: {track_uri}")
                self._start(context_uri, items, index)
                return
        raise PlayerError(f"Track {track_uri} not in {context_uri}")

    def _start(self, context_uri: str, items: list[PlaylistItem], index: int) -> None:
        item = items[index]
        try:
            self._audio.play(item.file_path, self._library.get_duration(item.uri))
        except Exception as e:
            raise PlayerError(f"Cannot play {item.file_path}: {e}")

        self._context_uri = context_uri
        self._items = items
        self._current_index = index
        logger.debug(f"Now playing {item.name} ({item.uri})")
        self._emit(TRACK_CHANGED)

    def _step(self, direction: int) -> None:
        playable = [i for i, item in enumerate(self._items) if item.is_playable]
        if not playable or self._context_uri is None:
            return

        if self._shuffle and direction > 0:
            others = [i for i in playable if i != self._current_index] or playable
            index = self._rng.choice(others)
        else:
            position = playable.index(self._current_index) if self._current_index in playable else 0
            index = playable[(position + direction) % len(playable)]

        try:
            self._start(self._context_uri, self._items, index)
        except PlayerError as e:
            logger.error(f"Native skip failed: {e}")
            self._audio.stop()

    def skip_to_next(self) -> None:
        self._step(1)

    def skip_to_previous(self) -> None:
        if self._audio.get_position() > 3.0:
            self.seek(0)
            return
        self._step(-1)

    def check_track_end(self) -> bool:
        """Auto-advance when the current file finished playing.

        Returns:
            True if the player advanced.
        """
        if not self._audio.track_ended_naturally():
            return False
        self.skip_to_next()
        return True

    def get_volume(self) -> float:
        return self._audio.get_volume()

    def set_volume(self, level: float) -> None:
        self._audio.set_volume(level)

    def get_progress(self) -> float:
        return self._audio.get_position()

    def get_duration(self) -> float:
        return self._audio.get_duration()

    def seek(self, position: float) -> None:
        if position != 0:
            logger.debug(f"Only seeking to start is supported, got {position}")
        self._audio.restart()

    def subscribe(self, event: str, handler: Callable[[], None]) -> None:
        self._subscribers[event].append(handler)

    def unsubscribe(self, event: str, handler: Callable[[], None]) -> None:
        if handler in self._subscribers[event]:
            self._subscribers[event].remove(handler)

    def _emit(self, event: str) -> None:
        for handler in list(self._subscribers[event]):
            handler()
