from .track import Track, HistoryEntry, ArtistRef, PlaylistItem, PlaylistSnapshot
from .config import ShuffleConfig
from .session import SessionState
from .playback import PlaybackState

__all__ = [
    "Track",
    "HistoryEntry",
    "ArtistRef",
    "PlaylistItem",
    "PlaylistSnapshot",
    "ShuffleConfig",
    "SessionState",
    "PlaybackState",
]
