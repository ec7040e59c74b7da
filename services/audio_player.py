import time
from typing import Optional

import pygame

from models.playback import PlaybackState


class AudioPlayer:
    """Thin pygame mixer wrapper playing one file at a time."""

    def __init__(self, volume: float = 0.7):
        pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)

        self._file_path: Optional[str] = None
        self._duration: float = 0.0
        self._volume: float = volume
        self._state: PlaybackState = PlaybackState.STOPPED
        self._start_time: float = 0
        self._pause_position: float = 0

        pygame.mixer.music.set_volume(self._volume)

    def play(self, file_path: str, duration: float = 0.0) -> None:
        """Load and play an audio file.

        Raises:
            pygame.error: If the file cannot be loaded.
        """
        try:
            pygame.mixer.music.load(file_path)
            pygame.mixer.music.play()
        except Exception:
            self._state = PlaybackState.STOPPED
            self._file_path = None
            raise

        self._file_path = file_path
        self._duration = duration
        self._state = PlaybackState.PLAYING
        self._start_time = time.time()
        self._pause_position = 0

    def pause(self) -> None:
        """Pause playback."""
        if self._state == PlaybackState.PLAYING:
            pygame.mixer.music.pause()
            self._state = PlaybackState.PAUSED
            self._pause_position = time.time() - self._start_time

    def resume(self) -> None:
        """Resume playback from paused state."""
        if self._state == PlaybackState.PAUSED:
            pygame.mixer.music.unpause()
            self._state = PlaybackState.PLAYING
            self._start_time = time.time() - self._pause_position

    def stop(self) -> None:
        """Stop playback and reset position."""
        pygame.mixer.music.stop()
        self._state = PlaybackState.STOPPED
        self._start_time = 0
        self._pause_position = 0

    def restart(self) -> None:
        """Seek the current track back to its start."""
        if self._state == PlaybackState.STOPPED or not self._file_path:
            return
        pygame.mixer.music.rewind()
        self._start_time = time.time()
        self._pause_position = 0

    def set_volume(self, level: float) -> None:
        """Set volume level (0.0 to 1.0)."""
        self._volume = max(0.0, min(1.0, level))
        pygame.mixer.music.set_volume(self._volume)

    def get_volume(self) -> float:
        """Return current volume level (0.0 to 1.0)."""
        return self._volume

    def get_state(self) -> PlaybackState:
        return self._state

    def get_position(self) -> float:
        """Return current playback position in seconds."""
        if self._state == PlaybackState.PAUSED:
            return self._pause_position
        elif self._state == PlaybackState.PLAYING:
            return time.time() - self._start_time
        return 0.0

    def get_duration(self) -> float:
        return self._duration

    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    def track_ended_naturally(self) -> bool:
        """Check if the mixer stopped on its own while we were playing."""
        return self._state == PlaybackState.PLAYING and not pygame.mixer.music.get_busy()
