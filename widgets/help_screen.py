from __future__ import annotations

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

from styles import HEADING, KEY, LABEL

KEY_SECTIONS = [
    ("Playlists", [
        ("j / k", "Move down/up in the playlist list"),
        ("Enter", "Start the selected playlist"),
    ]),
    ("Playback", [
        ("Space", "Play/Pause"),
        ("n", "Next track"),
        ("p", "Previous track, or restart at the first one"),
        ("r", "Toggle the player's own shuffle"),
        ("+ / -", "Volume up/down"),
    ]),
    ("True Shuffle", [
        ("t", "Turn True Shuffle on/off"),
        ("h / ?", "Show this help"),
        ("q", "Quit"),
    ]),
]

NOTES = [
    "Active while True Shuffle and the player's shuffle are both ON, in a playlist.",
    "Every third skip is a weighted pick that avoids recent tracks and artists.",
    "Other skips go to the player's shuffle, which is skipped again on a repeat.",
    "Each folder in ~/Music is a playlist; set TRUE_SHUFFLE_MUSIC_DIR to change it.",
]


def render_help() -> Table:
    """Build the key reference as a two column table."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style=KEY, no_wrap=True)
    table.add_column()

    for title, keys in KEY_SECTIONS:
        table.add_row(Text(title.upper(), style=HEADING), "")
        for key, description in keys:
            table.add_row(key, description)
        table.add_row("", "")

    table.add_row(Text("NOTES", style=HEADING), "")
    for note in NOTES:
        table.add_row("•", Text(note, style=LABEL))
    return table


class HelpScreen(ModalScreen[None]):
    """Modal key reference, closed with Escape."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("j", "scroll_help(1)", show=False),
        Binding("k", "scroll_help(-1)", show=False),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-container {
        width: 80;
        height: 80%;
        background: #1a1a1a;
        border: thick #cc5500;
        padding: 1 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="help-container"):
            with VerticalScroll(id="help-scroll"):
                yield Static(render_help(), id="help-content")

    def action_scroll_help(self, direction: int) -> None:
        scroll = self.query_one("#help-scroll", VerticalScroll)
        if direction > 0:
            scroll.scroll_down()
        else:
            scroll.scroll_up()
