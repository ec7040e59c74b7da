from textual.widgets import Static
from textual.reactive import reactive
from textual.containers import Vertical
from textual.app import ComposeResult
from rich.text import Text
from styles import ACCENT, FLAG_OFF, FLAG_ON, LABEL, RAIL, VOLUME_GRADIENT

TITLE_ASCII = """
 ╔╦╗╦═╗╦ ╦╔═╗  ╔═╗╦ ╦╦ ╦╔═╗╔═╗╦  ╔═╗
  ║ ╠╦╝║ ║║╣   ╚═╗╠═╣║ ║╠╣ ╠╣ ║  ║╣
  ╩ ╩╚═╚═╝╚═╝  ╚═╝╩ ╩╚═╝╚  ╚  ╩═╝╚═╝
"""

VOLUME_BAR_WIDTH = 20
DEFAULT_VOLUME_LEVEL = 70
SEPARATOR = "    │    "


def volume_bar(level: int, width: int = VOLUME_BAR_WIDTH) -> Text:
    """Render a volume percentage as a gradient bar."""
    filled = int((level / 100) * width)
    bar = Text("│", style=LABEL)
    for i in range(width):
        if i >= filled:
            bar.append("─", style=RAIL)
            continue
        segment = min(len(VOLUME_GRADIENT) - 1, i * len(VOLUME_GRADIENT) // width)
        bar.append("█", style=VOLUME_GRADIENT[segment])
    bar.append("│ ", style=LABEL)
    bar.append(f"{level}%", style=f"{ACCENT} bold")
    return bar


class Header(Vertical):
    """Title banner plus the volume and shuffle mode line."""

    volume_level: reactive[int] = reactive(DEFAULT_VOLUME_LEVEL)
    is_shuffle: reactive[bool] = reactive(True)
    true_shuffle: reactive[bool] = reactive(True)

    def compose(self) -> ComposeResult:
        yield Static(TITLE_ASCII, id="header-logo")
        yield Static("─" * 80, id="header-divider")
        yield Static(self._render_status(), id="header-status")

    def _render_status(self) -> Text:
        return Text.assemble(
            ("Volume ", LABEL),
            volume_bar(self.volume_level),
            (f"{SEPARATOR}Shuffle ", LABEL),
            self._flag(self.is_shuffle),
            (f"{SEPARATOR}True Shuffle ", LABEL),
            self._flag(self.true_shuffle),
        )

    @staticmethod
    def _flag(enabled: bool) -> tuple[str, str]:
        return ("ON", FLAG_ON) if enabled else ("OFF", FLAG_OFF)

    def _refresh_status(self) -> None:
        if not self.is_mounted:
            return
        self.query_one("#header-status", Static).update(self._render_status())

    def watch_volume_level(self, new_value: int) -> None:
        self._refresh_status()

    def watch_is_shuffle(self, new_value: bool) -> None:
        self._refresh_status()

    def watch_true_shuffle(self, new_value: bool) -> None:
        self._refresh_status()
