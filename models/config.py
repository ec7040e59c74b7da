from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRUE_SHUFFLE_"


@dataclass
class ShuffleConfig:
    """Tunables for selection, history and skip coordination.

    Time values are in seconds.

    Attributes:
        history_size: Maximum entries kept in play and navigation history
        no_repeat_window: Tracks within this many recent plays are never reselected
        min_weight: Floor applied to every candidate weight
        recency_decay_rate: Rate at which a played track recovers its weight
        artist_penalty: Multiplier for tracks sharing a recently played artist
        artist_spacing: Number of recent plays checked for the artist penalty
        true_shuffle_every: Every Nth skip is a weighted pick, the rest go native
        max_play_attempts: Weighted picks tried before a skip is abandoned
        max_native_retries: Native picks rejected before one is accepted anyway
        settle_delay: Time the skip guard stays held after a request completes
        native_skip_delay: Delay before invoking the native skip
        progress_interval: Playback progress sampling interval
        end_window: Trailing window treated as a natural end of track
        playlist_prefix: Context uri prefix identifying playlists
    """
    history_size: int = 500
    no_repeat_window: int = 100
    min_weight: float = 0.05
    recency_decay_rate: float = 0.15
    artist_penalty: float = 0.15
    artist_spacing: int = 2
    true_shuffle_every: int = 3
    max_play_attempts: int = 3
    max_native_retries: int = 5
    settle_delay: float = 1.5
    native_skip_delay: float = 0.05
    progress_interval: float = 1.0
    end_window: float = 5.0
    playlist_prefix: str = "spotify:playlist:"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ShuffleConfig:
        """Build a config from TRUE_SHUFFLE_* environment variables.

        Malformed values are logged and replaced by the default.

        Args:
            environ: Mapping to read from. Defaults to os.environ.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = getattr(config, f.name)
            try:
                value = type(default)(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}{f.name.upper()}={raw!r}")
                continue
            setattr(config, f.name, value)

        valid, error = config.validate()
        if not valid:
            logger.warning(f"Invalid shuffle configuration ({error}), using defaults")
            return cls(playlist_prefix=config.playlist_prefix)
        return config

    def validate(self) -> tuple[bool, str | None]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_message). If valid, error_message is None.
        """
        for name in ("history_size", "true_shuffle_every", "max_play_attempts"):
            if getattr(self, name) < 1:
                return False, f"{name} must be at least 1"

        for name in ("no_repeat_window", "artist_spacing", "max_native_retries"):
            if getattr(self, name) < 0:
                return False, f"{name} cannot be negative"

        if not 0 < self.min_weight <= 1:
            return False, "min_weight must be in (0, 1]"

        if self.recency_decay_rate <= 0:
            return False, "recency_decay_rate must be positive"

        if not 0 <= self.artist_penalty <= 1:
            return False, "artist_penalty must be in [0, 1]"

        for name in ("settle_delay", "native_skip_delay", "end_window"):
            if getattr(self, name) < 0:
                return False, f"{name} cannot be negative"

        if self.progress_interval <= 0:
            return False, "progress_interval must be positive"

        return True, None

    def is_valid(self) -> bool:
        valid, _ = self.validate()
        return valid
