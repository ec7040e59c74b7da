"""
Player Protocol

Contract the shuffle controller consumes from the host media player.
"""

from __future__ import annotations

from typing import Callable, Protocol

from models.track import PlaylistItem, Track

TRACK_CHANGED = "track-changed"


class PlayerError(Exception):
    """Raised when the player cannot load contents or start a track."""
    pass


class MediaPlayer(Protocol):
    """Host media player as seen by the shuffle controller.

    Position and duration are in seconds. Volume is 0.0 to 1.0.
    """

    def get_shuffle_enabled(self) -> bool: ...

    def get_current_context_uri(self) -> str | None: ...

    def get_current_track(self) -> Track | None: ...

    async def load_playlist_contents(self, context_uri: str) -> list[PlaylistItem]:
        """Enumerate a playlist. Raises PlayerError."""
        ...

    async def play_track_in_context(self, context_uri: str, track_uri: str) -> None:
        """Start a track inside a context. Raises PlayerError."""
        ...

    def get_volume(self) -> float: ...

    def set_volume(self, level: float) -> None: ...

    def get_progress(self) -> float: ...

    def get_duration(self) -> float: ...

    def seek(self, position: float) -> None: ...

    def skip_to_next(self) -> None:
        """Native forward skip, bypassing the shuffle controller."""
        ...

    def skip_to_previous(self) -> None:
        """Native back skip, bypassing the shuffle controller."""
        ...

    def subscribe(self, event: str, handler: Callable[[], None]) -> None: ...

    def unsubscribe(self, event: str, handler: Callable[[], None]) -> None: ...
