from textual.app import App, ComposeResult
from textual.widgets import Footer
from textual.containers import Horizontal
from textual.binding import Binding
import asyncio
import logging
import os
from pathlib import Path

from models.config import ShuffleConfig
from widgets import Header, HelpScreen
from views import LibraryView, NowPlayingView
from services.audio_player import AudioPlayer
from services.local_player import LocalPlayer
from services.music_library import MusicLibrary, PLAYLIST_PREFIX
from services.player_protocol import PlayerError
from services.session_controller import SessionController

TRACK_END_CHECK_INTERVAL = 0.5
VOLUME_STEP = 0.05

log_dir = Path.home() / '.local' / 'share' / 'trueshuffle'
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / 'trueshuffle.log'

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file)
    ]
)

logger = logging.getLogger(__name__)


class TrueShuffleApp(App):
    """Terminal player driving local playlists through True Shuffle."""

    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("space", "play_pause", "Play/Pause"),
        Binding("n", "next_track", "Next", priority=True),
        Binding("p", "previous_track", "Prev", priority=True),
        Binding("t", "toggle_true_shuffle", "True Shuffle", priority=True),
        Binding("r", "toggle_shuffle", "Shuffle", priority=True),
        Binding("+", "volume_up", "Vol+", priority=True),
        Binding("=", "volume_up", "Vol+", show=False, priority=True),
        Binding("-", "volume_down", "Vol-", priority=True),
        Binding("h", "show_help", "Help", priority=True),
        Binding("?", "show_help", "Help", show=False, priority=True),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        logger.info("Starting True Shuffle application")

        music_dir = os.environ.get('TRUE_SHUFFLE_MUSIC_DIR')
        self.music_library = MusicLibrary(Path(music_dir).expanduser() if music_dir else None)
        self.audio_player = AudioPlayer()
        self.player = LocalPlayer(self.music_library, self.audio_player)

        config = ShuffleConfig.from_env()
        config.playlist_prefix = PLAYLIST_PREFIX
        self.controller = SessionController(self.player, config)
        logger.info("Services initialized successfully")

    def compose(self) -> ComposeResult:
        """Compose the main application layout."""
        yield Header()

        with Horizontal(id="top-container"):
            yield LibraryView(id="library")
            yield NowPlayingView(self.player, self.controller, id="now_playing")

        yield Footer()

    async def on_mount(self) -> None:
        """Initialize the application."""
        self.query_one("#library", LibraryView).focus()
        self._update_header()

        await self.controller.start()
        self.run_worker(self._scan_library, exclusive=True)
        self.set_interval(TRACK_END_CHECK_INTERVAL, self._check_track_end)

    async def on_unmount(self) -> None:
        await self.controller.shutdown()

    async def _scan_library(self) -> None:
        """Scan for playlists in a background thread."""
        try:
            logger.info("Starting music library scan")
            playlists = await asyncio.to_thread(self.music_library.scan)
        except FileNotFoundError as e:
            logger.error(f"Music directory not found: {e}")
            self.notify(
                f"❌ Music directory not found\n\n{self.music_library.music_dir}",
                severity="error",
                timeout=10
            )
            return
        except PermissionError as e:
            logger.error(f"Permission denied accessing music directory: {e}")
            self.notify("❌ Cannot access music directory", severity="error", timeout=10)
            return

        self.query_one("#library", LibraryView).set_playlists(playlists)

        if not playlists:
            self.notify(
                "No playlists found\n\nAdd folders of audio files to your music directory.",
                severity="warning",
                timeout=8
            )
        else:
            self.notify(f"✓ Found {len(playlists)} playlists", timeout=3)

    async def on_library_view_playlist_selected(self, event: LibraryView.PlaylistSelected) -> None:
        try:
            await self.player.play_context(event.playlist_uri)
        except PlayerError as e:
            logger.error(f"Cannot start playlist: {e}")
            self.notify("❌ Cannot start playlist", severity="error", timeout=3)
        self._refresh_now_playing()

    def _check_track_end(self) -> None:
        """Let the player auto-advance when a track ends."""
        if self.player.check_track_end():
            logger.debug("Track ended naturally")
            self._refresh_now_playing()

    def _refresh_now_playing(self) -> None:
        self.query_one("#now_playing", NowPlayingView).update_progress()

    def _update_header(self) -> None:
        header = self.query_one(Header)
        state = self.controller.state
        volume = state.saved_volume if state.muted else self.audio_player.get_volume()
        header.volume_level = int(volume * 100)
        header.is_shuffle = self.player.get_shuffle_enabled()
        header.true_shuffle = self.controller.is_active

    def action_play_pause(self) -> None:
        """Toggle play/pause state."""
        if self.audio_player.is_playing():
            self.audio_player.pause()
        else:
            self.audio_player.resume()

    def action_next_track(self) -> None:
        self.controller.skip_forward()
        self._refresh_now_playing()

    def action_previous_track(self) -> None:
        self.controller.skip_back()
        self._refresh_now_playing()

    def action_toggle_true_shuffle(self) -> None:
        """Turn True Shuffle on or off."""
        active = self.controller.toggle()
        self._update_header()
        self.notify("True Shuffle enabled" if active else "True Shuffle disabled", timeout=1.5)

    def action_toggle_shuffle(self) -> None:
        """Toggle the player's own shuffle."""
        self.player.set_shuffle_enabled(not self.player.get_shuffle_enabled())
        self._update_header()

    def _change_volume(self, delta: float) -> None:
        if self.controller.state.muted:
            return
        self.audio_player.set_volume(self.audio_player.get_volume() + delta)
        self._update_header()

    def action_volume_up(self) -> None:
        """Increase volume."""
        self._change_volume(VOLUME_STEP)

    def action_volume_down(self) -> None:
        """Decrease volume."""
        self._change_volume(-VOLUME_STEP)

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())


def main():
    """Entry point for the True Shuffle application.

    Handles initialization errors and provides user-friendly error messages.
    """
    try:
        logger.info("=" * 60)
        logger.info("True Shuffle starting up")
        logger.info("=" * 60)

        app = TrueShuffleApp()
        app.run()

        logger.info("True Shuffle shut down cleanly")

    except RuntimeError as e:
        logger.critical(f"Fatal error during startup: {e}")
        print("\n❌ True Shuffle cannot start\n")
        print(f"{e}\n")
        print(f"Check {log_file} for more details.\n")
        exit(1)
    except KeyboardInterrupt:
        logger.info("True Shuffle interrupted by user")
        exit(0)
    except Exception as e:
        logger.critical(f"Unexpected fatal error: {type(e).__name__}: {e}", exc_info=True)
        print("\n❌ True Shuffle encountered an unexpected error\n")
        print(f"{type(e).__name__}: {e}\n")
        print(f"Check {log_file} for more details.\n")
        exit(1)


if __name__ == "__main__":
    main()
