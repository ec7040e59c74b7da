from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import ListView, ListItem, Label
from textual.containers import Container


class LibraryView(Container):
    """Playlist list with vim navigation; Enter starts a playlist."""

    DEFAULT_CSS = """
    LibraryView {
        background: #1a1a1a;
        border: solid #ff8c00;
        padding: 1;
    }

    LibraryView > Label {
        color: #ff8c00;
        text-style: bold;
        padding: 0 0 1 0;
    }
    """

    BINDINGS = [
        ("j", "move_down", "Move down"),
        ("k", "move_up", "Move up"),
    ]

    class PlaylistSelected(Message):
        """Posted when the user picks a playlist."""

        def __init__(self, playlist_uri: str) -> None:
            super().__init__()
            self.playlist_uri = playlist_uri

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.playlists: list[tuple[str, str]] = []

    def compose(self) -> ComposeResult:
        """Compose the library view with an empty playlist list."""
        yield Label("🎵 Playlists")
        yield ListView(id="playlist-list")

    def set_playlists(self, playlists: list[tuple[str, str]]) -> None:
        """Replace the displayed playlists.

        Args:
            playlists: List of (playlist uri, display name).
        """
        self.playlists = playlists
        list_view = self.query_one("#playlist-list", ListView)
        list_view.clear()
        for _, name in playlists:
            list_view.append(ListItem(Label(f"♪ {name}")))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        if index is not None and 0 <= index < len(self.playlists):
            self.post_message(self.PlaylistSelected(self.playlists[index][0]))

    def action_move_down(self) -> None:
        """Move selection down in the list (j key)."""
        list_view = self.query_one("#playlist-list", ListView)
        list_view.action_cursor_down()

    def action_move_up(self) -> None:
        """Move selection up in the list (k key)."""
        list_view = self.query_one("#playlist-list", ListView)
        list_view.action_cursor_up()
