"""Rich style strings shared by the True Shuffle widgets."""

ACCENT = "#ff8c00"
LABEL = "#888888"
RAIL = "#333333"

# Volume bar gradient, quietest segment first
VOLUME_GRADIENT = ("#cc5500", "#ff8c00", "#ffb347")

FLAG_ON = f"{ACCENT} bold"
FLAG_OFF = "#555555"
HEADING = f"bold {ACCENT}"
KEY = "bold #ffb347"
