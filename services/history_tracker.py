"""
History Tracker

Session-scoped play history (feeds the weighted selector) and navigation
history (the linear timeline used for back/forward).
"""

from __future__ import annotations

import logging

from models.track import HistoryEntry, Track

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 500


class HistoryTracker:
    """Bounded play history plus navigation timeline with a cursor."""

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self.history_size = history_size
        self._play_history: list[HistoryEntry] = []
        self._navigation: list[str] = []
        self._navigation_index: int = -1

    @property
    def play_history(self) -> list[HistoryEntry]:
        """Play history, most recent first."""
        return list(self._play_history)

    @property
    def navigation(self) -> list[str]:
        return list(self._navigation)

    @property
    def navigation_index(self) -> int:
        return self._navigation_index

    @property
    def at_navigation_tail(self) -> bool:
        return self._navigation_index >= len(self._navigation) - 1

    @property
    def can_step_back(self) -> bool:
        return self._navigation_index > 0

    def record_play(self, track: Track | HistoryEntry) -> None:
        """Move the track to the front of play history.

        Any earlier entry for the same uri is removed, so play history
        never holds duplicates.
        """
        entry = track.to_entry() if isinstance(track, Track) else track
        self._play_history = [h for h in self._play_history if h.uri != entry.uri]
        self._play_history.insert(0, entry)
        del self._play_history[self.history_size:]

    def record_failed_attempt(self, track: Track) -> None:
        """Treat a track that failed to start as just played.

        The entry is prepended without de-duplication so the next pick is
        biased away from it.
        """
        self._play_history.insert(0, track.to_entry())
        del self._play_history[self.history_size:]

    def push_navigation(self, uri: str) -> None:
        """Append a played track to the navigation timeline.

        Entries after the cursor are discarded first. On overflow the oldest
        entries are dropped and the cursor shifted with them.
        """
        if not uri:
            return
        if not self.at_navigation_tail:
            del self._navigation[self._navigation_index + 1:]
        self._navigation.append(uri)
        self._navigation_index = len(self._navigation) - 1

        overflow = len(self._navigation) - self.history_size
        if overflow > 0:
            del self._navigation[:overflow]
            self._navigation_index -= overflow

    def step_back(self) -> str | None:
        """Move the cursor back one entry.

        Returns:
            Uri at the new cursor, or None if already at the first entry.
        """
        if not self.can_step_back:
            return None
        self._navigation_index -= 1
        return self._navigation[self._navigation_index]

    def step_forward(self) -> str | None:
        """Move the cursor forward one entry.

        Returns:
            Uri at the new cursor, or None if already at the tail.
        """
        if self.at_navigation_tail:
            return None
        self._navigation_index += 1
        return self._navigation[self._navigation_index]

    def rollback_forward(self) -> None:
        """Undo a step_forward whose replay failed."""
        if self._navigation_index > 0:
            self._navigation_index -= 1

    def reset(self) -> None:
        self._play_history = []
        self._navigation = []
        self._navigation_index = -1
        logger.debug("History reset")
