"""
Test doubles for the shuffle core.

A scripted in-memory player and a manually driven scheduler, so skip
scenarios run without audio, files or real timers.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Callable

from models.track import ArtistRef, PlaylistItem, Track
from services.player_protocol import TRACK_CHANGED, PlayerError
from services.scheduler import DeferredScheduler

PLAYLIST_URI = "spotify:playlist:p1"
OTHER_PLAYLIST_URI = "spotify:playlist:p2"


def track_uri(index: int) -> str:
    return f"spotify:track:{index}"


def make_items(count: int, artists: list[str] | None = None, start: int = 0) -> list[PlaylistItem]:
    """Build playlist items; each track gets its own artist unless given."""
    items = []
    for i in range(start, start + count):
        artist = artists[i - start] if artists else f"spotify:artist:{i}"
        items.append(PlaylistItem(
            uri=track_uri(i),
            name=f"Song {i}",
            artists=(ArtistRef(uri=artist, name=f"Artist {artist}"),),
        ))
    return items


def make_track(index: int, artist_uri: str | None = None) -> Track:
    return Track(
        uri=track_uri(index),
        artist_uri=artist_uri or f"spotify:artist:{index}",
        name=f"Song {index}",
        artist_name="Artist",
    )


async def settle(rounds: int = 5) -> None:
    """Let spawned tasks run to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakePlayer:
    """Scripted MediaPlayer.

    The native skip plays the next uri from native_queue; playing a uri
    listed in failing_uris raises PlayerError.
    """

    def __init__(self, playlists: dict[str, list[PlaylistItem]] | None = None, shuffle: bool = True):
        self.playlists = playlists or {}
        self.context_uri: str | None = None
        self.current: Track | None = None
        self.shuffle = shuffle
        self.volume = 0.8
        self.progress = 0.0
        self.duration = 0.0
        self.failing_uris: set[str] = set()
        self.load_error: Exception | None = None
        self.load_calls: list[str] = []
        self.played: list[str] = []
        self.native_queue: list[str] = []
        self.native_skips = 0
        self.native_backs = 0
        self.seeks: list[float] = []
        self.volume_changes: list[float] = []
        self._handlers: dict[str, list[Callable[[], None]]] = defaultdict(list)

    def _track(self, uri: str, context_uri: str | None) -> Track:
        for item in self.playlists.get(context_uri, []):
            if item.uri == uri:
                return item.to_track()
        return Track(uri=uri)

    def start(self, uri: str, context_uri: str | None = None) -> None:
        """Simulate playback of uri starting, emitting track-changed."""
        if context_uri is not None:
            self.context_uri = context_uri
        self.current = self._track(uri, self.context_uri)
        for handler in list(self._handlers[TRACK_CHANGED]):
            handler()

    def get_shuffle_enabled(self) -> bool:
        return self.shuffle

    def get_current_context_uri(self) -> str | None:
        return self.context_uri

    def get_current_track(self) -> Track | None:
        return self.current

    async def load_playlist_contents(self, context_uri: str) -> list[PlaylistItem]:
        self.load_calls.append(context_uri)
        if self.load_error is not None:
            raise self.load_error
        if context_uri not in self.playlists:
            raise PlayerError(f"Unknown playlist: {context_uri}")
        return list(self.playlists[context_uri])

    async def play_track_in_context(self, context_uri: str, track_uri: str) -> None:
        if track_uri in self.failing_uris:
            raise PlayerError(f"Cannot play {track_uri}")
        self.played.append(track_uri)
        self.start(track_uri, context_uri)

    def get_volume(self) -> float:
        return self.volume

    def set_volume(self, level: float) -> None:
        self.volume = level
        self.volume_changes.append(level)

    def get_progress(self) -> float:
        return self.progress

    def get_duration(self) -> float:
        return self.duration

    def seek(self, position: float) -> None:
        self.seeks.append(position)

    def skip_to_next(self) -> None:
        self.native_skips += 1
        if self.native_queue:
            self.start(self.native_queue.pop(0))

    def skip_to_previous(self) -> None:
        self.native_backs += 1

    def subscribe(self, event: str, handler: Callable[[], None]) -> None:
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Callable[[], None]) -> None:
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def subscriber_count(self, event: str = TRACK_CHANGED) -> int:
        return len(self._handlers[event])


class ManualScheduler(DeferredScheduler):
    """Scheduler whose callbacks only fire on run_pending()."""

    def __init__(self):
        super().__init__()
        self.calls: list[tuple[int, float, Callable, tuple]] = []

    def call_later(self, delay, callback, *args) -> None:
        self.calls.append((self.epoch, delay, callback, args))

    def invalidate(self) -> None:
        super().invalidate()
        self.calls.clear()

    def pending(self) -> int:
        return len(self.calls)

    def run_pending(self, limit: int = 100) -> int:
        """Fire callbacks shortest delay first, including ones they schedule.

        Returns:
            Number of callbacks fired.
        """
        fired = 0
        while self.calls and fired < limit:
            index = min(range(len(self.calls)), key=lambda i: self.calls[i][1])
            epoch, _, callback, args = self.calls.pop(index)
            if epoch == self.epoch:
                callback(*args)
            fired += 1
        return fired
