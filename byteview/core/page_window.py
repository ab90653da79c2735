"""
Page window over a loaded byte buffer.
"""

import logging
from typing import Tuple

from .errors import NoMoreDataError

logger = logging.getLogger(__name__)


class PageWindow:
    """Current page's byte range for a fixed page size.

    Attributes:
        page_size: Bytes per page (> 0).
        total_length: Length of the loaded buffer.
        start_offset: Offset of the current page, always a multiple of
            page_size and never past total_length.
    """

    def __init__(self, page_size: int, total_length: int = 0):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive: {page_size}")
        if total_length < 0:
            raise ValueError(f"total_length cannot be negative: {total_length}")

        self.page_size = page_size
        self.total_length = total_length
        self.start_offset = 0

    @property
    def current_page(self) -> int:
        """1-based page number."""
        return self.start_offset // self.page_size + 1

    @property
    def page_count(self) -> int:
        if self.total_length == 0:
            return 1
        return -(-self.total_length // self.page_size)

    def reset(self, total_length: int) -> None:
        """Start over on a new buffer."""
        if total_length < 0:
            raise ValueError(f"total_length cannot be negative: {total_length}")
        self.total_length = total_length
        self.start_offset = 0

    def first_page(self) -> None:
        self.start_offset = 0

    def next_page(self) -> None:
        """Advance one page.

        Raises:
            NoMoreDataError: The next page would start at or past the end.
                The window is left unchanged.
        """
        candidate = self.start_offset + self.page_size
        if candidate >= self.total_length:
            logger.debug(
                "Next page rejected at offset %d (length %d)",
                self.start_offset,
                self.total_length,
            )
            raise NoMoreDataError()
        self.start_offset = candidate

    def prev_page(self) -> None:
        """Go back one page, clamping at the first page."""
        self.start_offset = max(0, self.start_offset - self.page_size)

    def current_range(self) -> Tuple[int, int]:
        """Half-open ``(start, end)`` of the current page."""
        end = min(self.start_offset + self.page_size, self.total_length)
        return self.start_offset, end

    def __repr__(self) -> str:
        start, end = self.current_range()
        return (
            f"PageWindow(page={self.current_page}/{self.page_count}, "
            f"range=[{start}, {end}), page_size={self.page_size})"
        )
