"""
TUI constants for byteview.

Centralizes key maps and labels used across TUI components.
"""

from ..core.decoder import DataTypeMode

MODE_KEYS = {
    "1": DataTypeMode.BYTES,
    "2": DataTypeMode.CHARACTERS,
    "3": DataTypeMode.HEX,
    "4": DataTypeMode.UTF8_CHARACTERS,
    "5": DataTypeMode.UTF8_BYTES,
    "6": DataTypeMode.UTF16_CHARACTERS,
    "7": DataTypeMode.UTF16_BYTES,
}
"""Number keys selecting a data type, in the order of the mode buttons."""

PROGRESS_TITLES = {
    "load": "Loading",
    "mode": "Changing view",
    "page": "Changing page",
}

NO_FILE_TEXT = "Press [bold]o[/bold] to open a file"

CANCELLED_TEXT = "Rendering cancelled. Press [bold]r[/bold] to render this page again"
