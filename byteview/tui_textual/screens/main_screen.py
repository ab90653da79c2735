"""
Main screen for the byteview TUI

Every view action is submitted to the coordinator's worker thread. While it
runs, a timer polls the request's ProgressSignal to drive the progress
dialog, and an async worker awaits the result. A newer request supersedes
the one in flight; results of superseded requests are dropped.
"""

import asyncio
from typing import Callable, Optional

from textual.app import ComposeResult
from textual.timer import Timer
from textual.widgets import Static

from ...core.decoder import DataTypeMode
from ...core.view_coordinator import RenderHandle, RenderResult
from ..adapters.view_adapter import TUIViewAdapter
from ..constants import CANCELLED_TEXT, PROGRESS_TITLES
from ..widgets.byte_view import ByteView
from ..widgets.dialogs import InputDialog, MessageDialog, ProgressDialog
from ..widgets.status_bar import StatusBar


class MainScreen(Static):
    """Main screen (byte view)."""

    DEFAULT_CSS = """
    MainScreen {
        height: 1fr;
        width: 1fr;
    }
    """

    def __init__(self, file_path: Optional[str] = None, **kwargs):
        """
        Initialize MainScreen.

        Args:
            file_path: File to open once mounted.
        """
        super().__init__(**kwargs)
        self._initial_file = file_path
        self.view_adapter: Optional[TUIViewAdapter] = None
        self._active_handle: Optional[RenderHandle] = None
        self._progress_dialog: Optional[ProgressDialog] = None
        self._poll_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        self.byte_view = ByteView()
        yield self.byte_view

    def on_mount(self) -> None:
        """Handle screen initialization."""
        self.view_adapter = TUIViewAdapter()
        self.byte_view.set_mode(self.view_adapter.mode)

        theme_name = self.view_adapter.config.tui.theme
        if theme_name:
            try:
                self.app.theme = theme_name
            except ValueError:
                # 無効なテーマ名の場合は警告のみ
                self.app.notify(
                    f"Unknown theme '{theme_name}', using default",
                    severity="warning",
                )

        if self.view_adapter.config_errors:
            self.app.push_screen(
                MessageDialog(
                    "Configuration",
                    "Invalid settings, using defaults:\n"
                    + "\n".join(self.view_adapter.config_errors),
                    "warning",
                )
            )

        if self._initial_file:
            self.load_file(self._initial_file)

    def on_unmount(self) -> None:
        if self.view_adapter is not None:
            self.view_adapter.shutdown()

    @property
    def is_busy(self) -> bool:
        return self._active_handle is not None

    # --- Actions ---

    def prompt_open_file(self) -> None:
        """Ask for a path and load it."""
        if self.is_busy:
            self.app.notify("Wait for the current view to finish", severity="warning")
            return

        self.app.push_screen(
            InputDialog("Load File", "Path to the file to view:"),
            self._handle_path_input,
        )

    def _handle_path_input(self, path: Optional[str]) -> None:
        if path:
            self.load_file(path)

    def load_file(self, path: str) -> None:
        self._start(
            PROGRESS_TITLES["load"],
            f"Loading {path}...",
            lambda: self.view_adapter.open_file(path),
        )

    def change_mode(self, mode: DataTypeMode) -> None:
        self._start(
            PROGRESS_TITLES["mode"],
            f"Rendering {mode.label}...",
            lambda: self.view_adapter.change_mode(mode),
        )

    def show_page(self, direction: str) -> None:
        self._start(
            PROGRESS_TITLES["page"],
            f"Rendering {direction} page...",
            lambda: self.view_adapter.show_page(direction),
        )

    def cancel_render(self) -> None:
        if self._active_handle is not None:
            self._active_handle.cancel()

    # --- Render lifecycle ---

    def _start(
        self, title: str, message: str, submit: Callable[[], RenderHandle]
    ) -> None:
        handle = submit()
        self._active_handle = handle

        if self._progress_dialog is None:
            self._progress_dialog = ProgressDialog(
                title, message, on_cancel=self.cancel_render
            )
            self.app.push_screen(self._progress_dialog)
            self._poll_timer = self.set_interval(
                self.view_adapter.poll_interval, self._poll_progress
            )
        else:
            self._progress_dialog.update_progress(0, message)

        self.run_worker(self._await_result(handle), exclusive=False)

    def _poll_progress(self) -> None:
        """Progress watcher: mirrors the active signal into the dialog."""
        handle = self._active_handle
        if handle is None or self._progress_dialog is None:
            return

        snapshot = handle.signal.snapshot()
        self._progress_dialog.update_progress(snapshot.percentage)

    async def _await_result(self, handle: RenderHandle) -> None:
        result = await asyncio.wrap_future(handle.future)

        if handle is not self._active_handle:
            self.app.log.info("Dropping superseded render result")
            return

        self._active_handle = None
        self._close_progress()
        self._show_result(result)

    def _close_progress(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.stop()
            self._poll_timer = None

        dialog = self._progress_dialog
        self._progress_dialog = None
        if dialog is not None and self.app.screen is dialog:
            dialog.dismiss()

    def _show_result(self, result: RenderResult) -> None:
        self.byte_view.set_mode(result.mode)

        if result.cancelled:
            # ページ・モードの変更は確定済みなので、表示を現在の状態に合わせる
            self.byte_view.show_text(CANCELLED_TEXT, markup=True)
            self._update_status(result)
            self.app.notify("Rendering cancelled", severity="warning")
            return

        if result.is_notice:
            self.app.notify(result.error_message, title="Information")
            return

        if result.error_occurred:
            self.app.log.error(f"Render failed: {result.error_message}")
            self.app.push_screen(MessageDialog("Error", result.error_message, "error"))
            return

        self.byte_view.show_text(result.text)
        self._update_status(result)

    def _update_status(self, result: RenderResult) -> None:
        self.screen.query_one(StatusBar).update_info(
            result.current_page, result.page_count, result.filename, result.file_size
        )
