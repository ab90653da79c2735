"""
Status bar widget for the Textual TUI.

Displays the current page, file name and file size.
"""

from typing import Optional

from rich.text import Text
from textual.widgets import Static


class StatusBar(Static):
    """Status bar showing page, filename and size labels.

    Attributes:
        page: Current 1-based page.
        page_count: Total pages of the loaded file.
        filename: Name of the loaded file, or None.
        file_size: Size of the loaded file in bytes.
    """

    def __init__(self) -> None:
        super().__init__("")
        self.page: int = 1
        self.page_count: int = 1
        self.filename: Optional[str] = None
        self.file_size: int = 0

    def on_mount(self) -> None:
        self._refresh_display()

    def update_info(
        self,
        page: int,
        page_count: int,
        filename: Optional[str],
        file_size: Optional[int],
    ) -> None:
        self.page = page
        self.page_count = page_count
        self.filename = filename
        self.file_size = file_size or 0
        self._refresh_display()

    def _refresh_display(self) -> None:
        text = Text()
        text.append("Page number: ", style="dim")
        text.append(f"{self.page}/{self.page_count}", style="bold")
        text.append("  │  Filename: ", style="dim")
        text.append(self.filename or "None", style="bold")
        text.append("  │  File size: ", style="dim")
        text.append(f"{self.file_size} bytes", style="bold")
        self.update(text)
