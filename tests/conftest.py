"""
Shared pytest fixtures for the shuffle core tests.

Collaborators are replaced by the doubles in tests/test_doubles.py; no audio
device, files or environment variables are used.
"""

import random

import pytest

from models.config import ShuffleConfig
from services.session_controller import SessionController
from tests.test_doubles import (
    OTHER_PLAYLIST_URI,
    PLAYLIST_URI,
    FakePlayer,
    ManualScheduler,
    make_items,
)


@pytest.fixture
def playlist_items():
    """Ten tracks, each by a different artist."""
    return make_items(10)


@pytest.fixture
def fake_player(playlist_items):
    """Player with two playlists and native shuffle enabled."""
    return FakePlayer(playlists={
        PLAYLIST_URI: playlist_items,
        OTHER_PLAYLIST_URI: make_items(5, start=100),
    })


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config():
    return ShuffleConfig()


@pytest.fixture
def controller(fake_player, manual_scheduler, rng, config):
    """Controller over the fake player; call start() inside the test loop."""
    return SessionController(fake_player, config, rng=rng, scheduler=manual_scheduler)
