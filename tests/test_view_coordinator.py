"""
Tests for ViewCoordinator: loading, paging, mode changes and supersede.
"""

import threading

import pytest

from byteview.core.decoder import DataTypeMode, Decoder
from byteview.core.file_loader import FileLoader
from byteview.core.progress import ProgressSignal
from byteview.core.view_coordinator import LOAD_PROGRESS_SHARE, ViewCoordinator

SAMPLE = b"Hey!?"


class RecordingSignal(ProgressSignal):
    """ProgressSignal that keeps every value it is given."""

    def __init__(self):
        super().__init__()
        self.history = []

    def set_percentage(self, value):
        super().set_percentage(value)
        self.history.append(self.percentage)


def make_coordinator(page_size=2, mode=DataTypeMode.CHARACTERS, chunk_size=600, **kwargs):
    return ViewCoordinator(
        page_size=page_size,
        mode=mode,
        decoder=Decoder(chunk_size=chunk_size, yield_delay=0),
        **kwargs,
    )


class TestPaging:
    """Page size 2 over a 5-byte buffer."""

    def test_load_renders_first_page(self):
        """Loading shows page 1 of 3"""
        coordinator = make_coordinator()
        result = coordinator.load(SAMPLE, filename="hey.txt")

        assert not result.error_occurred
        assert result.text == "He"
        assert (result.current_page, result.page_count) == (1, 3)
        assert result.file_size == 5
        assert result.filename == "hey.txt"
        assert result.mode is DataTypeMode.CHARACTERS

    def test_walk_pages(self):
        """next/prev move one page at a time"""
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)

        assert coordinator.next_page().text == "y!"
        assert coordinator.next_page().text == "?"
        assert coordinator.prev_page().text == "y!"
        assert coordinator.first_page().text == "He"

    def test_next_page_past_end(self):
        """Paging past the end is an informational notice and keeps the page"""
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        coordinator.next_page()
        coordinator.next_page()

        result = coordinator.next_page()

        assert result.error_occurred
        assert result.is_notice
        assert result.error_message == "No more data."
        assert result.current_page == 3
        assert coordinator.start_offset == 4

    def test_prev_page_on_first_page(self):
        """prev on page 1 re-renders page 1"""
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        result = coordinator.prev_page()
        assert result.text == "He"
        assert result.current_page == 1

    def test_refresh(self):
        """refresh re-renders the current page"""
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        coordinator.next_page()
        assert coordinator.refresh().text == "y!"


class TestModes:
    """Switching the data type."""

    def test_change_mode_returns_to_first_page(self):
        """A mode change restarts at page 1"""
        coordinator = make_coordinator(page_size=10, mode=DataTypeMode.BYTES)
        coordinator.load(SAMPLE)

        result = coordinator.change_mode(DataTypeMode.HEX)
        assert result.text == "48 65 79 21 3f "
        assert result.mode is DataTypeMode.HEX

        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        coordinator.next_page()
        assert coordinator.change_mode("bytes").text == "72 101 "
        assert coordinator.current_page == 1

    def test_change_mode_without_data(self):
        """The mode is kept even when nothing is loaded"""
        coordinator = make_coordinator(page_size=10)
        result = coordinator.change_mode(DataTypeMode.HEX)

        assert result.error_occurred
        assert result.error_message == "No data loaded."
        assert not result.is_notice
        assert coordinator.mode is DataTypeMode.HEX

        assert coordinator.load(SAMPLE).text == "48 65 79 21 3f "

    def test_change_mode_rejects_unknown_name(self):
        """Unknown mode names are rejected before anything changes"""
        coordinator = make_coordinator()
        with pytest.raises(ValueError):
            coordinator.change_mode("octal")
        assert coordinator.mode is DataTypeMode.CHARACTERS


class TestErrors:
    """Failure paths."""

    def test_navigation_without_data(self):
        """Paging before a load reports that nothing is loaded"""
        coordinator = make_coordinator()
        for action in (coordinator.next_page, coordinator.prev_page, coordinator.first_page):
            result = action()
            assert result.error_occurred
            assert result.message_type == "error"
            assert result.error_message == "No data loaded."

    def test_load_null(self):
        """Loading None is an error and keeps the previous buffer"""
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        result = coordinator.load(None)
        assert result.error_message == "Data cannot be null."
        assert coordinator.file_size == 5

    def test_too_large_keeps_state(self, tmp_path):
        """A refused file leaves the current buffer, page and filename alone"""
        big = tmp_path / "big.bin"
        big.write_bytes(b"x" * 4096)
        coordinator = make_coordinator(file_loader=FileLoader(max_file_size_mb=1 / 1024))
        coordinator.load(SAMPLE, filename="hey.txt")
        coordinator.next_page()

        result = coordinator.load_file(big)

        assert result.error_occurred
        assert result.error_message == "File size was too large."
        assert result.filename == "hey.txt"
        assert coordinator.current_page == 2
        assert coordinator.file_size == 5

    def test_missing_file(self, tmp_path):
        """A missing file is reported as an error"""
        result = make_coordinator().load_file(tmp_path / "missing.bin")
        assert result.error_occurred
        assert result.message_type == "error"

    def test_load_file(self, tmp_path):
        """load_file records the file name"""
        path = tmp_path / "hey.txt"
        path.write_bytes(SAMPLE)
        result = make_coordinator().load_file(path)
        assert result.text == "He"
        assert result.filename == "hey.txt"


class TestProgressAndChunks:
    """Signals and incremental output."""

    def test_load_file_progress_never_goes_back(self, tmp_path):
        """Reading and rendering share one 0-100 climb"""
        path = tmp_path / "data.bin"
        path.write_bytes(b"\x01" * 2000)
        signal = RecordingSignal()

        result = make_coordinator(page_size=2000).load_file(path, signal=signal)

        assert not result.error_occurred
        assert signal.history == sorted(signal.history)
        assert signal.history[-1] == 100.0
        assert LOAD_PROGRESS_SHARE in signal.history

    def test_render_progress_never_goes_back(self):
        """A page render alone also climbs monotonically"""
        coordinator = make_coordinator(page_size=2000)
        coordinator.load(b"\x01" * 2000)
        signal = RecordingSignal()

        coordinator.refresh(signal=signal)

        assert signal.history == sorted(signal.history)
        assert signal.history[-1] == 100.0

    def test_signal_finished_after_render(self):
        """The caller's signal is finished at 100% after a render"""
        coordinator = make_coordinator()
        signal = ProgressSignal()
        coordinator.load(SAMPLE, signal=signal)
        assert signal.is_finished()
        assert signal.percentage == 100.0

    def test_signal_finished_after_error(self):
        """The signal is finished even when the action fails"""
        signal = ProgressSignal()
        make_coordinator().next_page(signal=signal)
        assert signal.is_finished()

    def test_on_chunk_receives_output(self):
        """Chunks reach the callback in order"""
        coordinator = make_coordinator(page_size=10, chunk_size=2)
        chunks = []
        result = coordinator.load(SAMPLE, on_chunk=chunks.append)
        assert chunks == ["He", "y!", "?"]
        assert result.text == "Hey!?"


class TestSubmit:
    """Background execution and supersede."""

    def test_submit_returns_result(self):
        """A submitted action completes on the worker thread"""
        with make_coordinator() as coordinator:
            handle = coordinator.submit(coordinator.load, SAMPLE)
            result = handle.result(timeout=5)
            assert result.text == "He"
            assert handle.done()
            assert handle.signal.is_finished()

    def test_newer_request_supersedes_older(self):
        """Submitting a request cancels the one still rendering"""
        release = threading.Event()
        first_chunk = threading.Event()

        def block_on_first_chunk(chunk):
            first_chunk.set()
            release.wait(timeout=5)

        with make_coordinator(page_size=10, chunk_size=1) as coordinator:
            older = coordinator.submit(coordinator.load, SAMPLE, on_chunk=block_on_first_chunk)
            assert first_chunk.wait(timeout=5)

            newer = coordinator.submit(coordinator.change_mode, DataTypeMode.HEX)
            assert older.signal.is_cancelled()
            release.set()

            older_result = older.result(timeout=5)
            newer_result = newer.result(timeout=5)

        assert older_result.cancelled
        assert older.signal.is_finished()
        assert not newer_result.cancelled
        assert newer_result.text == "48 65 79 21 3f "

    def test_handle_cancel(self):
        """Cancelling a handle yields a cancelled result"""
        release = threading.Event()
        first_chunk = threading.Event()

        def block_on_first_chunk(chunk):
            first_chunk.set()
            release.wait(timeout=5)

        with make_coordinator(page_size=10, chunk_size=1) as coordinator:
            handle = coordinator.submit(coordinator.load, SAMPLE, on_chunk=block_on_first_chunk)
            assert first_chunk.wait(timeout=5)
            handle.cancel()
            release.set()
            result = handle.result(timeout=5)

        assert result.cancelled
        assert result.text == ""
        assert handle.signal.is_finished()

    def test_cancelled_page_change_reports_committed_page(self):
        """A cancelled next_page still reports the page it moved to"""
        release = threading.Event()
        first_chunk = threading.Event()

        def block_on_first_chunk(chunk):
            first_chunk.set()
            release.wait(timeout=5)

        with make_coordinator(chunk_size=1) as coordinator:
            coordinator.load(SAMPLE, filename="hey.txt")
            handle = coordinator.submit(
                coordinator.next_page, on_chunk=block_on_first_chunk
            )
            assert first_chunk.wait(timeout=5)
            handle.cancel()
            release.set()
            result = handle.result(timeout=5)

            assert result.cancelled
            assert (result.current_page, result.page_count) == (2, 3)
            assert result.filename == "hey.txt"
            assert result.mode is DataTypeMode.CHARACTERS

            # The committed page renders on request, and paging continues from it
            assert coordinator.refresh().text == "y!"
            assert coordinator.next_page().text == "?"

    def test_cancelled_mode_change_reports_new_mode(self):
        """A cancelled change_mode reports the mode that is now active"""
        signal = ProgressSignal()
        coordinator = make_coordinator()
        coordinator.load(SAMPLE)
        coordinator.next_page()
        signal.request_cancel()

        result = coordinator.change_mode(DataTypeMode.HEX, signal=signal)

        assert result.cancelled
        assert result.mode is DataTypeMode.HEX
        assert result.current_page == 1
        assert coordinator.refresh().text == "48 65 "
