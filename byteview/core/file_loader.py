"""
Size-capped file loading
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .errors import FileLoadError, LoadTooLargeError
from .progress import ProgressPhase, ProgressSignal

logger = logging.getLogger(__name__)

READ_BLOCK_SIZE = 64 * 1024


class FileLoader:
    """Reads whole files into memory, refusing files over a size cap.

    Args:
        max_file_size_mb: Size cap in MB. 0 or less disables the cap.
    """

    def __init__(self, max_file_size_mb: float = 10.0):
        self.max_file_size_mb = max_file_size_mb

    @property
    def max_bytes(self) -> Optional[int]:
        if self.max_file_size_mb <= 0:
            return None
        return int(self.max_file_size_mb * 1024 * 1024)

    def is_too_large(self, size: int) -> bool:
        max_bytes = self.max_bytes
        return max_bytes is not None and size > max_bytes

    def load_file(
        self,
        path: Union[str, Path],
        signal: Optional[Union[ProgressSignal, ProgressPhase]] = None,
    ) -> bytes:
        """Load a file.

        Args:
            path: File to read.
            signal: Optional signal receiving read progress and checked for
                cancellation between blocks.

        Returns:
            The file content, or the part read before cancellation.

        Raises:
            LoadTooLargeError: The file exceeds the size cap. Nothing is read.
            FileLoadError: The path is missing, not a file, or unreadable.
        """
        file_path = Path(path).expanduser()

        try:
            if not file_path.is_file():
                raise FileLoadError(f"File not found: {file_path}")
            size = file_path.stat().st_size
        except OSError as e:
            raise FileLoadError(f"Cannot access file '{file_path}': {e}") from e

        if self.is_too_large(size):
            logger.warning(
                "Refusing %s: %d bytes exceeds limit of %s MB",
                file_path,
                size,
                self.max_file_size_mb,
            )
            raise LoadTooLargeError()

        logger.info("Loading %s (%d bytes)", file_path, size)

        blocks = []
        read = 0
        try:
            with open(file_path, "rb") as f:
                while True:
                    if signal is not None and signal.is_cancelled():
                        break
                    block = f.read(READ_BLOCK_SIZE)
                    if not block:
                        break
                    blocks.append(block)
                    read += len(block)
                    if signal is not None and size:
                        signal.set_percentage(100 * min(read, size) / size)
        except OSError as e:
            raise FileLoadError(f"Cannot read file '{file_path}': {e}") from e

        data = b"".join(blocks)

        # File grew between stat() and read()
        if self.is_too_large(len(data)):
            raise LoadTooLargeError()

        return data
