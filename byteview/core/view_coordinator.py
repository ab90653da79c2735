"""
View coordinator

Owns the loaded buffer, the page window and the selected DataTypeMode, and
turns each user action (load, change mode, change page) into a RenderResult.
This is the seam the display surface calls into; nothing here touches
presentation.

Overlapping requests are handled by cancel-and-supersede: registering a new
request cancels every earlier request that has not finished yet, and renders
themselves run one at a time under a per-coordinator lock. Page and mode
changes made by a superseded request stay committed; only its text is
dropped.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .decoder import DataTypeMode, Decoder
from .errors import ByteViewError, NoDataLoadedError, NoMoreDataError, NullInputError
from .file_loader import FileLoader
from .page_window import PageWindow
from .progress import ProgressPhase, ProgressSignal

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10000

# Share of a load_file request's progress spent reading the file
LOAD_PROGRESS_SHARE = 50

ChunkCallback = Optional[Callable[[str], None]]


@dataclass
class RenderResult:
    """Outcome of one render request."""

    text: str = ""
    error_occurred: bool = False
    error_message: Optional[str] = None
    message_type: str = "success"  # success, error, info
    cancelled: bool = False
    current_page: int = 1
    page_count: int = 1
    file_size: Optional[int] = None
    filename: Optional[str] = None
    mode: Optional[DataTypeMode] = None

    @property
    def is_notice(self) -> bool:
        """True for soft, informational failures such as 'No more data.'"""
        return self.error_occurred and self.message_type == "info"


class RenderHandle:
    """Future-style handle for a submitted render.

    Watchers poll ``signal.snapshot()`` or block on ``signal.wait()``;
    the result is available from ``result()`` once ``done()``.
    """

    def __init__(self, signal: ProgressSignal, future: Future):
        self.signal = signal
        self.future = future

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> RenderResult:
        return self.future.result(timeout)

    def cancel(self) -> None:
        """Ask the render to stop. The worker still marks the signal finished."""
        self.signal.request_cancel()


class ViewCoordinator:
    """Orchestrates PageWindow and Decoder for each user action.

    Args:
        page_size: Bytes per page.
        mode: Initial DataTypeMode.
        decoder: Decoder to render with.
        file_loader: Loader used by load_file().
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        mode: DataTypeMode = DataTypeMode.BYTES,
        decoder: Optional[Decoder] = None,
        file_loader: Optional[FileLoader] = None,
    ):
        logger.debug("Constructing ViewCoordinator (page_size=%d)", page_size)

        self._window = PageWindow(page_size)
        self._mode = DataTypeMode.from_value(mode)
        self._decoder = decoder or Decoder()
        self._file_loader = file_loader or FileLoader()

        self._data: Optional[bytes] = None
        self._filename: Optional[str] = None

        self._render_lock = threading.Lock()
        self._pending_lock = threading.Lock()
        self._pending: List[ProgressSignal] = []
        self._executor: Optional[ThreadPoolExecutor] = None

    # --- State ---

    @property
    def mode(self) -> DataTypeMode:
        return self._mode

    @property
    def page_size(self) -> int:
        return self._window.page_size

    @property
    def start_offset(self) -> int:
        return self._window.start_offset

    @property
    def current_page(self) -> int:
        return self._window.current_page

    @property
    def page_count(self) -> int:
        return self._window.page_count

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    @property
    def file_size(self) -> Optional[int]:
        return None if self._data is None else len(self._data)

    @property
    def filename(self) -> Optional[str]:
        return self._filename

    # --- Operations ---

    def load(
        self,
        data: Optional[bytes],
        filename: Optional[str] = None,
        signal: Optional[ProgressSignal] = None,
        on_chunk: ChunkCallback = None,
    ) -> RenderResult:
        """Replace the loaded buffer and render its first page."""

        def action(signal, on_chunk):
            self._commit(data, filename)
            return self._render(signal, on_chunk)

        return self._run(action, signal, on_chunk)

    def load_file(
        self,
        path: Union[str, Path],
        signal: Optional[ProgressSignal] = None,
        on_chunk: ChunkCallback = None,
    ) -> RenderResult:
        """Load a file from disk and render its first page.

        A failed or cancelled load leaves the previous buffer, page and
        filename untouched. Reading the file reports the first half of the
        request's progress and rendering the first page the second half.
        """

        def action(signal, on_chunk):
            data = self._file_loader.load_file(
                path, ProgressPhase(signal, 0, LOAD_PROGRESS_SHARE)
            )
            if signal.is_cancelled():
                logger.info("Load of %s cancelled", path)
                return self._result(cancelled=True)
            self._commit(data, Path(path).name)
            return self._render(
                signal, on_chunk, ProgressPhase(signal, LOAD_PROGRESS_SHARE, 100)
            )

        return self._run(action, signal, on_chunk)

    def change_mode(
        self,
        mode: Union[DataTypeMode, str],
        signal: Optional[ProgressSignal] = None,
        on_chunk: ChunkCallback = None,
    ) -> RenderResult:
        """Switch encoding and restart at the first page.

        The new mode is kept even when nothing is loaded yet, so the next
        load renders with it.

        Raises:
            ValueError: mode is not a DataTypeMode name.
        """
        new_mode = DataTypeMode.from_value(mode)

        def action(signal, on_chunk):
            self._mode = new_mode
            self._window.first_page()
            logger.debug("Changed view type to %s", new_mode.value)
            return self._render(signal, on_chunk)

        return self._run(action, signal, on_chunk)

    def next_page(
        self, signal: Optional[ProgressSignal] = None, on_chunk: ChunkCallback = None
    ) -> RenderResult:
        def action(signal, on_chunk):
            logger.debug("Fetching next page.")
            self._require_data()
            self._window.next_page()
            return self._render(signal, on_chunk)

        return self._run(action, signal, on_chunk)

    def prev_page(
        self, signal: Optional[ProgressSignal] = None, on_chunk: ChunkCallback = None
    ) -> RenderResult:
        def action(signal, on_chunk):
            logger.debug("Fetching previous page.")
            self._require_data()
            self._window.prev_page()
            return self._render(signal, on_chunk)

        return self._run(action, signal, on_chunk)

    def first_page(
        self, signal: Optional[ProgressSignal] = None, on_chunk: ChunkCallback = None
    ) -> RenderResult:
        def action(signal, on_chunk):
            logger.debug("Fetching first page.")
            self._require_data()
            self._window.first_page()
            return self._render(signal, on_chunk)

        return self._run(action, signal, on_chunk)

    def refresh(
        self, signal: Optional[ProgressSignal] = None, on_chunk: ChunkCallback = None
    ) -> RenderResult:
        """Render the current page again."""
        return self._run(lambda s, c: self._render(s, c), signal, on_chunk)

    # --- Background execution ---

    def submit(
        self, action: Callable[..., RenderResult], *args, on_chunk: ChunkCallback = None
    ) -> RenderHandle:
        """Run one of this coordinator's operations on its worker thread.

        Example:
            handle = coordinator.submit(coordinator.change_mode, DataTypeMode.HEX)
            result = handle.result()
        """
        signal = ProgressSignal()
        self._register(signal)
        future = self._get_executor().submit(
            action, *args, signal=signal, on_chunk=on_chunk
        )
        return RenderHandle(signal, future)

    def cancel_all(self) -> None:
        """Cancel every request that has not finished."""
        with self._pending_lock:
            for pending in self._pending:
                pending.request_cancel()

    def shutdown(self) -> None:
        self.cancel_all()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "ViewCoordinator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # --- Internals ---

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="byteview-render"
            )
        return self._executor

    def _register(self, signal: ProgressSignal) -> None:
        """Make signal the newest request, superseding older ones."""
        with self._pending_lock:
            if signal in self._pending:
                return
            for pending in self._pending:
                pending.request_cancel()
            self._pending.append(signal)

    def _unregister(self, signal: ProgressSignal) -> None:
        with self._pending_lock:
            if signal in self._pending:
                self._pending.remove(signal)

    def _run(
        self,
        action: Callable[[ProgressSignal, ChunkCallback], RenderResult],
        signal: Optional[ProgressSignal],
        on_chunk: ChunkCallback,
    ) -> RenderResult:
        signal = signal or ProgressSignal()
        self._register(signal)
        try:
            with self._render_lock:
                return action(signal, on_chunk)
        except NoMoreDataError as e:
            return self._result(error=e, message_type="info")
        except ByteViewError as e:
            logger.warning("Render failed: %s", e)
            return self._result(error=e, message_type="error")
        finally:
            self._unregister(signal)
            signal.set_finished()

    def _commit(self, data: Optional[bytes], filename: Optional[str]) -> None:
        if data is None:
            logger.error("Data cannot be null. Returning.")
            raise NullInputError()
        self._data = bytes(data)
        self._filename = filename
        self._window.reset(len(self._data))
        logger.info("Loaded %d bytes (%s)", len(self._data), filename or "<memory>")

    def _require_data(self) -> None:
        if self._data is None:
            raise NoDataLoadedError()

    def _render(
        self,
        signal: ProgressSignal,
        on_chunk: ChunkCallback,
        progress: Optional[ProgressPhase] = None,
    ) -> RenderResult:
        self._require_data()
        start, end = self._window.current_range()
        text = self._decoder.decode(
            self._data, self._mode, start, end, progress or signal, on_chunk=on_chunk
        )
        if signal.is_cancelled():
            logger.debug("Render of page %d superseded", self.current_page)
            return self._result(cancelled=True)
        return self._result(text=text)

    def _result(
        self,
        text: str = "",
        error: Optional[Exception] = None,
        message_type: str = "success",
        cancelled: bool = False,
    ) -> RenderResult:
        return RenderResult(
            text=text,
            error_occurred=error is not None,
            error_message=str(error) if error is not None else None,
            message_type=message_type,
            cancelled=cancelled,
            current_page=self.current_page,
            page_count=self.page_count,
            file_size=self.file_size,
            filename=self._filename,
            mode=self._mode,
        )
