"""Tests for the local host player and the on-disk music library."""

import asyncio
import random

import pytest

from models.track import ArtistRef, PlaylistItem
from services.local_player import LocalPlayer
from services.music_library import MusicLibrary, PLAYLIST_PREFIX
from services.player_protocol import TRACK_CHANGED, PlayerError


class FakeAudio:
    """Records AudioPlayer calls instead of touching the mixer."""

    def __init__(self):
        self.played = []
        self.volume = 0.7
        self.position = 0.0
        self.ended = False
        self.restarts = 0
        self.broken_paths = set()

    def play(self, file_path, duration=0.0):
        if file_path in self.broken_paths:
            raise RuntimeError("cannot decode")
        self.played.append(file_path)

    def stop(self):
        pass

    def restart(self):
        self.restarts += 1

    def get_volume(self):
        return self.volume

    def set_volume(self, level):
        self.volume = level

    def get_position(self):
        return self.position

    def get_duration(self):
        return 180.0

    def track_ended_naturally(self):
        return self.ended


class StubLibrary:

    def __init__(self, playlists):
        self.playlists = playlists

    def load_playlist(self, playlist_uri):
        return self.playlists[playlist_uri]

    def get_duration(self, track_uri):
        return 180.0


def _items(count, unplayable=()):
    return [
        PlaylistItem(
            uri=f"track:mix/{i}.mp3",
            name=f"Song {i}",
            artists=(ArtistRef(f"artist:{i}", f"Artist {i}"),),
            file_path=f"/music/mix/{i}.mp3",
            is_playable=i not in unplayable,
        )
        for i in range(count)
    ]


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def local_player(audio):
    library = StubLibrary({"playlist:mix": _items(4, unplayable={2})})
    return LocalPlayer(library, audio, random.Random(5))


class TestLocalPlayer:

    def test_play_track_in_context_emits_track_changed(self, local_player, audio):
        changes = []
        local_player.subscribe(TRACK_CHANGED, lambda: changes.append(local_player.get_current_track().uri))

        asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/1.mp3"))

        assert changes == ["track:mix/1.mp3"]
        assert audio.played == ["/music/mix/1.mp3"]
        assert local_player.get_current_context_uri() == "playlist:mix"
        assert local_player.get_current_track().artist_uri == "artist:1"

    def test_unplayable_or_unknown_tracks_raise(self, local_player):
        with pytest.raises(PlayerError):
            asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/2.mp3"))
        with pytest.raises(PlayerError):
            asyncio.run(local_player.play_track_in_context("playlist:mix", "track:other.mp3"))
        with pytest.raises(PlayerError):
            asyncio.run(local_player.load_playlist_contents("playlist:missing"))

    def test_decode_failure_is_a_player_error(self, local_player, audio):
        audio.broken_paths.add("/music/mix/0.mp3")
        with pytest.raises(PlayerError):
            asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/0.mp3"))
        assert local_player.get_current_track() is None

    def test_native_shuffle_never_repeats_current_or_plays_unplayable(self, local_player):
        asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/0.mp3"))

        for _ in range(30):
            before = local_player.get_current_track().uri
            local_player.skip_to_next()
            after = local_player.get_current_track().uri
            assert after != before
            assert after != "track:mix/2.mp3"

    def test_sequential_order_without_shuffle(self, local_player):
        local_player.set_shuffle_enabled(False)
        asyncio.run(local_player.play_context("playlist:mix"))

        uris = [local_player.get_current_track().uri]
        for _ in range(3):
            local_player.skip_to_next()
            uris.append(local_player.get_current_track().uri)

        assert uris == ["track:mix/0.mp3", "track:mix/1.mp3", "track:mix/3.mp3", "track:mix/0.mp3"]

    def test_previous_restarts_when_past_start(self, local_player, audio):
        asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/1.mp3"))
        audio.position = 42.0

        local_player.skip_to_previous()

        assert audio.restarts == 1
        assert local_player.get_current_track().uri == "track:mix/1.mp3"

    def test_check_track_end_advances(self, local_player, audio):
        asyncio.run(local_player.play_track_in_context("playlist:mix", "track:mix/1.mp3"))
        assert not local_player.check_track_end()

        audio.ended = True

        assert local_player.check_track_end()
        assert local_player.get_current_track().uri != "track:mix/1.mp3"

    def test_volume_passes_through(self, local_player, audio):
        local_player.set_volume(0)
        assert audio.volume == 0
        assert local_player.get_volume() == 0


class TestMusicLibrary:

    def test_missing_directory_raises(self, tmp_path):
        library = MusicLibrary(tmp_path / "nope")
        with pytest.raises(FileNotFoundError):
            library.scan()

    def test_scan_finds_directories_with_audio(self, tmp_path):
        (tmp_path / "Road Trip").mkdir()
        (tmp_path / "Road Trip" / "a.mp3").write_bytes(b"not really audio")
        (tmp_path / "Notes").mkdir()
        (tmp_path / "Notes" / "readme.txt").write_text("hello")

        playlists = MusicLibrary(tmp_path).scan()

        assert playlists == [(f"{PLAYLIST_PREFIX}Road Trip", "Road Trip")]

    def test_unreadable_files_are_unplayable(self, tmp_path):
        (tmp_path / "Mix").mkdir()
        (tmp_path / "Mix" / "broken.mp3").write_bytes(b"\x00" * 16)
        library = MusicLibrary(tmp_path)
        library.scan()

        items = library.load_playlist(f"{PLAYLIST_PREFIX}Mix")

        assert [(i.uri, i.is_playable, i.name) for i in items] == [("track:Mix/broken.mp3", False, "broken")]

    def test_unknown_playlist_raises_key_error(self, tmp_path):
        library = MusicLibrary(tmp_path)
        library.scan()
        with pytest.raises(KeyError):
            library.load_playlist("playlist:ghost")
