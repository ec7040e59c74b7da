from textual.app import ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Static
from models.track import format_time
from services.local_player import LocalPlayer
from services.session_controller import SessionController

PROGRESS_UPDATE_INTERVAL = 1.0


class NowPlayingView(Container):
    """Widget displaying the current track and shuffle navigation state."""

    def __init__(self, player: LocalPlayer, controller: SessionController, **kwargs):
        """Initialize NowPlayingView with player and controller references."""
        super().__init__(**kwargs)
        self.player = player
        self.controller = controller
        self._update_timer = None
        self._title_widget: Static | None = None
        self._artist_widget: Static | None = None
        self._time_widget: Static | None = None
        self._history_widget: Static | None = None

    def compose(self) -> ComposeResult:
        """Compose the now playing view with track info."""
        with Vertical():
            yield Static("♪", classes="music-icon")
            yield Static("No track playing", id="np-title", classes="track-title")
            yield Static("Artist: Unknown", id="np-artist", classes="track-metadata")
            yield Static("0:00 / 0:00", id="np-time", classes="time-display")
            yield Static("", id="np-history", classes="state-display")

    def on_mount(self) -> None:
        """Start update timer for real-time progress updates."""
        self._title_widget = self.query_one("#np-title", Static)
        self._artist_widget = self.query_one("#np-artist", Static)
        self._time_widget = self.query_one("#np-time", Static)
        self._history_widget = self.query_one("#np-history", Static)

        self._update_timer = self.set_interval(PROGRESS_UPDATE_INTERVAL, self.update_progress)
        self.update_progress()

    def update_progress(self) -> None:
        """Update all display widgets with current playback information."""
        track = self.player.get_current_track()

        if track:
            self._title_widget.update(track.name)
            self._artist_widget.update(f"Artist: {track.artist_name}")
            position = format_time(self.player.get_progress())
            total = format_time(self.player.get_duration())
            self._time_widget.update(f"{position} / {total}")
        else:
            self._title_widget.update("No track playing")
            self._artist_widget.update("Artist: Unknown")
            self._time_widget.update("0:00 / 0:00")

        history = self.controller.history
        self._history_widget.update(
            f"History {history.navigation_index + 1}/{len(history.navigation)}"
            f"  │  Played {len(history.play_history)}"
            f"  │  Skips {self.controller.state.skip_counter}"
        )
