import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

from mutagen import File as MutagenFile

from models.track import ArtistRef, PlaylistItem

logger = logging.getLogger(__name__)

PLAYLIST_PREFIX = "playlist:"
TRACK_PREFIX = "track:"
ARTIST_PREFIX = "artist:"


class MusicLibrary:
    """Service for discovering playlists and their tracks on disk.

    Every sub-directory of the music directory that holds audio files is a
    playlist. Files whose tags cannot be read are reported as unplayable.
    """

    SUPPORTED_EXTENSIONS = {'.mp3', '.flac', '.wav', '.ogg', '.m4a'}
    DEFAULT_MUSIC_DIR = Path.home() / "Music"

    def __init__(self, music_dir: Optional[Path] = None):
        """Initialize MusicLibrary with optional custom music directory.

        Args:
            music_dir: Path to music directory. Defaults to ~/Music if not provided.
        """
        self.music_dir = music_dir or self.DEFAULT_MUSIC_DIR
        self._playlists: Dict[str, Path] = {}
        self._items: Dict[str, List[PlaylistItem]] = {}
        self._durations: Dict[str, float] = {}

    def scan(self) -> List[Tuple[str, str]]:
        """Scan music directory for playlist directories.

        Returns:
            List of (playlist uri, display name) sorted by name.
        """
        self._playlists = {}
        self._items = {}

        if not self.music_dir.exists():
            raise FileNotFoundError(f"Music directory not found: {self.music_dir}")

        for directory in sorted(p for p in self.music_dir.iterdir() if p.is_dir()):
            if any(self._audio_files(directory)):
                self._playlists[f"{PLAYLIST_PREFIX}{directory.name}"] = directory

        logger.info(f"Discovered {len(self._playlists)} playlists in {self.music_dir}")
        return [(uri, path.name) for uri, path in self._playlists.items()]

    def get_playlists(self) -> List[Tuple[str, str]]:
        return [(uri, path.name) for uri, path in self._playlists.items()]

    def load_playlist(self, playlist_uri: str) -> List[PlaylistItem]:
        """Return the items of a playlist, reading tags on first access.

        Args:
            playlist_uri: Uri returned by scan().

        Raises:
            KeyError: If the playlist is unknown.
        """
        if playlist_uri in self._items:
            return self._items[playlist_uri]

        directory = self._playlists[playlist_uri]
        items = []
        for file_path in sorted(self._audio_files(directory)):
            track_uri = f"{TRACK_PREFIX}{file_path.relative_to(self.music_dir).as_posix()}"
            try:
                metadata = self._extract_metadata(file_path)
            except Exception as e:
                logger.warning(f"Could not extract metadata from {file_path}: {e}")
                items.append(PlaylistItem(
                    uri=track_uri,
                    is_playable=False,
                    name=file_path.stem,
                    file_path=str(file_path),
                ))
                continue

            self._durations[track_uri] = metadata['duration']
            items.append(PlaylistItem(
                uri=track_uri,
                name=metadata['title'],
                artists=(ArtistRef(
                    uri=f"{ARTIST_PREFIX}{metadata['artist'].lower()}",
                    name=metadata['artist'],
                ),),
                file_path=str(file_path),
            ))

        self._items[playlist_uri] = items
        return items

    def get_duration(self, track_uri: str) -> float:
        return self._durations.get(track_uri, 0.0)

    def _audio_files(self, directory: Path):
        return (
            p for p in directory.rglob("*")
            if p.is_file() and p.suffix.lower() in self.SUPPORTED_EXTENSIONS
        )

    @staticmethod
    def _extract_metadata(file_path: Path) -> Dict[str, Any]:
        """Extract metadata from audio file using mutagen.

        Args:
            file_path: Path to audio file.

        Returns:
            Dictionary containing title, artist and duration.
            Uses fallbacks for missing tags.

        Raises:
            ValueError: If file cannot be read as audio.
        """
        audio = MutagenFile(file_path, easy=True)

        if audio is None:
            raise ValueError(f"Could not read audio file: {file_path}")

        title = file_path.stem
        artist = "Unknown Artist"
        if audio.tags:
            if 'title' in audio.tags:
                title = str(audio.tags['title'][0]) if isinstance(audio.tags['title'], list) else str(audio.tags['title'])
            if 'artist' in audio.tags:
                artist = str(audio.tags['artist'][0]) if isinstance(audio.tags['artist'], list) else str(audio.tags['artist'])

        duration = 0.0
        if audio.info and hasattr(audio.info, 'length'):
            duration = float(audio.info.length)

        return {
            'title': title,
            'artist': artist,
            'duration': duration
        }
