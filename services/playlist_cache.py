"""
Playlist Cache

Lazily loads the playable tracks of the current playlist context and keeps
them until the context identity changes.
"""

from __future__ import annotations

import logging

from models.track import PlaylistItem, PlaylistSnapshot, Track
from services.player_protocol import MediaPlayer, PlayerError

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_PREFIX = "spotify:playlist:"


def is_playlist_context(context_uri: str | None, prefix: str = DEFAULT_PLAYLIST_PREFIX) -> bool:
    return bool(context_uri) and context_uri.startswith(prefix)


def playable_tracks(items: list[PlaylistItem]) -> list[Track]:
    """Map playlist items to tracks, dropping non-tracks and unplayable items."""
    tracks = []
    for item in items:
        if not item.uri or item.kind != "track":
            continue
        if item.is_playable is False:
            continue
        tracks.append(item.to_track())
    return tracks


class PlaylistCache:
    """Caches one PlaylistSnapshot keyed by context uri."""

    def __init__(self, player: MediaPlayer, playlist_prefix: str = DEFAULT_PLAYLIST_PREFIX):
        self._player = player
        self._playlist_prefix = playlist_prefix
        self._context_uri: str | None = None
        self._snapshot: PlaylistSnapshot | None = None
        self._expected_context: str | None = None

    @property
    def context_uri(self) -> str | None:
        return self._context_uri

    @property
    def tracks(self) -> list[Track]:
        return self._snapshot.tracks if self._snapshot else []

    async def _load(self, context_uri: str) -> PlaylistSnapshot | None:
        """Fetch and filter the contents of a playlist context.

        Returns:
            Snapshot of playable tracks, or None if the context is not a
            playlist or the player failed to enumerate it.
        """
        if not is_playlist_context(context_uri, self._playlist_prefix):
            return None

        try:
            items = await self._player.load_playlist_contents(context_uri)
        except PlayerError as e:
            logger.warning(f"Error loading playlist {context_uri}: {e}")
            return None

        tracks = playable_tracks(items)
        logger.info(f"Loaded {len(tracks)} playable of {len(items)} items from {context_uri}")
        return PlaylistSnapshot(context_uri=context_uri, tracks=tracks)

    async def ensure_loaded(self, context_uri: str | None) -> bool:
        """Make sure tracks for context_uri are cached.

        Args:
            context_uri: Context currently governing playback.

        Returns:
            True if a non-empty track list is cached for the context.
        """
        if not context_uri:
            return False

        if context_uri != self._context_uri or self._snapshot is None:
            self._context_uri = context_uri
            self._snapshot = await self._load(context_uri)

        return bool(self._snapshot and self._snapshot.tracks)

    async def preload(self, context_uri: str) -> None:
        """Warm the cache for a new context without blocking the caller.

        The result is dropped if the cache moved to another context while
        the load was in flight.
        """
        snapshot = await self._load(context_uri)
        if snapshot is None:
            return
        current = self._context_uri or self._expected_context
        if current not in (None, context_uri):
            logger.debug(f"Discarding stale preload of {context_uri}")
            return
        self._context_uri = context_uri
        self._snapshot = snapshot

    def clear(self, next_context_uri: str | None = None) -> None:
        """Drop the cached snapshot.

        Args:
            next_context_uri: Context about to be played; a preload for any
                other context finishing later is discarded.
        """
        self._context_uri = None
        self._snapshot = None
        self._expected_context = next_context_uri
