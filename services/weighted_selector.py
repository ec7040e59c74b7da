"""
Weighted Selector

Weighted random track selection with a hard no-repeat window, a recency
penalty that decays as a play recedes into history, and artist spacing.
Pure logic: no state, no I/O.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Sequence

from models.config import ShuffleConfig
from models.track import HistoryEntry, Track

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = ShuffleConfig()


def excluded_uris(history: Sequence[HistoryEntry], window: int) -> set[str]:
    """Return the track uris inside the no-repeat window."""
    return {entry.uri for entry in history[:window]}


def recency_factor(position: int, config: ShuffleConfig = DEFAULT_CONFIG) -> float:
    """Weight factor for a track last played at history position.

    Position 0 is the most recent play and gets a near-zero factor; the
    factor rises towards 1 as the play moves further back.
    """
    return max(config.min_weight, 1 - math.exp(-config.recency_decay_rate * position))


def calculate_weight(
    track: Track,
    history: Sequence[HistoryEntry],
    config: ShuffleConfig = DEFAULT_CONFIG,
) -> float:
    """
    Calculate the selection weight of a single candidate.

    Args:
        track: Candidate track
        history: Play history, most recent first
        config: Weighting parameters

    Returns:
        Weight of at least config.min_weight
    """
    weight = 1.0

    for position, entry in enumerate(history):
        if entry.uri == track.uri:
            weight *= recency_factor(position, config)
            break

    if track.artist_uri:
        recent_artists = [entry.artist_uri for entry in history[:config.artist_spacing]]
        if track.artist_uri in recent_artists:
            weight *= config.artist_penalty

    return max(config.min_weight, weight)


def pick_next_track(
    tracks: Sequence[Track],
    history: Sequence[HistoryEntry],
    config: ShuffleConfig | None = None,
    rng: random.Random | None = None,
) -> Track | None:
    """
    Pick the next track using weighted random selection.

    Tracks inside the no-repeat window are excluded. When that excludes
    every track the full list is used again, so a pick is always made.

    Args:
        tracks: Candidate tracks
        history: Play history, most recent first
        config: Weighting parameters
        rng: Random source, for deterministic testing

    Returns:
        The chosen track, or None if there are no candidates
    """
    if not tracks:
        return None
    if len(tracks) == 1:
        return tracks[0]

    config = config or DEFAULT_CONFIG
    rng = rng or random

    recent = excluded_uris(history, config.no_repeat_window)
    candidates = [t for t in tracks if t.uri not in recent]
    if not candidates:
        logger.debug(f"All {len(tracks)} tracks inside no-repeat window, using full list")
        candidates = list(tracks)

    weights = [calculate_weight(t, history, config) for t in candidates]
    total_weight = sum(weights)

    remaining = rng.random() * total_weight
    for track, weight in zip(candidates, weights):
        remaining -= weight
        if remaining <= 0:
            return track

    return candidates[-1]
