"""
Byte-stream decoding and pagination engine
"""

from .decoder import DataTypeMode, Decoder
from .errors import (
    ByteViewError,
    FileLoadError,
    LoadTooLargeError,
    NoDataLoadedError,
    NoMoreDataError,
    NullInputError,
    UnknownModeError,
)
from .file_loader import FileLoader
from .page_window import PageWindow
from .progress import ProgressPhase, ProgressSignal, ProgressSnapshot
from .view_coordinator import RenderHandle, RenderResult, ViewCoordinator

__all__ = [
    "DataTypeMode",
    "Decoder",
    "ByteViewError",
    "FileLoadError",
    "LoadTooLargeError",
    "NoDataLoadedError",
    "NoMoreDataError",
    "NullInputError",
    "UnknownModeError",
    "FileLoader",
    "PageWindow",
    "ProgressPhase",
    "ProgressSignal",
    "ProgressSnapshot",
    "RenderHandle",
    "RenderResult",
    "ViewCoordinator",
]
