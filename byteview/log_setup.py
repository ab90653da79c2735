"""
Logging bootstrap for byteview
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from .utils import get_byteview_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_file() -> Path:
    return get_byteview_dir() / "byteview.log"


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    verbose: bool = False,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``byteview`` logger.

    Args:
        log_file: Debug log destination (default: $BYTEVIEW_DIR/byteview.log).
            Falls back to console-only logging if it cannot be opened.
        verbose: Send INFO and above to stderr as well.
        console: Allow a console handler at all. The TUI passes False so
            nothing is written over the screen.
    """
    logger = logging.getLogger("byteview")
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = Path(log_file) if log_file else default_log_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        file_handler = None

    if file_handler is not None:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

    if console and verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.propagate = False
    return logger
