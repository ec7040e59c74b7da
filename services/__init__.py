from .weighted_selector import pick_next_track, calculate_weight
from .history_tracker import HistoryTracker
from .playlist_cache import PlaylistCache
from .scheduler import DeferredScheduler
from .skip_coordinator import SkipCoordinator
from .session_controller import SessionController
from .player_protocol import MediaPlayer, PlayerError, TRACK_CHANGED

__all__ = [
    'pick_next_track',
    'calculate_weight',
    'HistoryTracker',
    'PlaylistCache',
    'DeferredScheduler',
    'SkipCoordinator',
    'SessionController',
    'MediaPlayer',
    'PlayerError',
    'TRACK_CHANGED',
]
