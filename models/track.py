from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class Track:
    """Represents a playable track in a playlist context."""
    uri: str
    artist_uri: str | None = None
    name: str = UNKNOWN_NAME
    artist_name: str = UNKNOWN_NAME
    file_path: str = ""  # Only set by the local player

    def to_entry(self) -> HistoryEntry:
        """Build the history entry for this track."""
        return HistoryEntry(uri=self.uri, artist_uri=self.artist_uri)


@dataclass(frozen=True)
class HistoryEntry:
    """A single play-history record, identity and artist only."""
    uri: str
    artist_uri: str | None = None


@dataclass(frozen=True)
class ArtistRef:
    uri: str | None
    name: str | None = None


@dataclass(frozen=True)
class PlaylistItem:
    """Raw playlist content item as reported by the player."""
    uri: str | None
    kind: str = "track"
    is_playable: bool = True
    name: str | None = None
    artists: tuple[ArtistRef, ...] = ()
    file_path: str = ""

    def to_track(self) -> Track:
        """Map the item to a Track using its first artist.

        Returns:
            Track with "Unknown" fallbacks for missing names.
        """
        first_artist = self.artists[0] if self.artists else None
        return Track(
            uri=self.uri or "",
            artist_uri=first_artist.uri if first_artist else None,
            name=self.name or UNKNOWN_NAME,
            artist_name=(first_artist.name if first_artist else None) or UNKNOWN_NAME,
            file_path=self.file_path,
        )


@dataclass
class PlaylistSnapshot:
    """Ordered playable tracks of one playlist context."""
    context_uri: str
    tracks: list[Track] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tracks)


def format_time(seconds: float) -> str:
    """Format seconds as M:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
