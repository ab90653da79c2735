"""
Byte view widget for the Textual TUI
"""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import ScrollableContainer, Vertical
from textual.widgets import Label, Static

from ...core.decoder import DataTypeMode
from ..constants import NO_FILE_TEXT


class ByteView(Vertical):
    """Mode header plus a scrollable text area holding the rendered page."""

    DEFAULT_CSS = """
    ByteView {
        border: solid $primary;
        height: 1fr;
        width: 1fr;
        padding: 0;
    }

    ByteView #mode-label {
        width: 1fr;
        height: 1;
        padding: 0 1;
        background: $primary;
        color: $text;
        text-style: bold;
    }

    ByteView ScrollableContainer {
        width: 1fr;
        height: 1fr;
        scrollbar-gutter: stable;
    }

    ByteView ScrollableContainer > Static {
        width: 1fr;
        height: auto;
        padding: 1;
    }
    """

    def __init__(self, mode: DataTypeMode = DataTypeMode.BYTES):
        super().__init__()
        self.mode = mode

    def compose(self) -> ComposeResult:
        yield Label(self.mode.label, id="mode-label")
        yield ScrollableContainer(
            Static(NO_FILE_TEXT, id="byte-output"),
            id="byte-container",
        )

    def set_mode(self, mode: Optional[DataTypeMode]) -> None:
        if mode is None:
            return
        self.mode = mode
        self.query_one("#mode-label", Label).update(mode.label)

    def show_text(self, text: str, markup: bool = False) -> None:
        """Replace the output with a rendered page, or a markup notice."""
        # Text() so that bytes like "[" are never read as markup
        content = Text.from_markup(text) if markup else Text(text)
        self.query_one("#byte-output", Static).update(content)
        self.query_one("#byte-container", ScrollableContainer).scroll_home(
            animate=False
        )
