"""
Dialog widgets for the Textual TUI
"""

from typing import Callable, Optional, Union

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Center, Horizontal, Middle, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, ProgressBar


class BaseDialog(ModalScreen):
    """共通レイアウト: タイトル、本文、ボタン行"""

    DEFAULT_CSS = """
    BaseDialog {
        align: center middle;
    }

    BaseDialog .dialog-container {
        height: auto;
        background: $surface;
        border: solid $primary;
        padding: 1;
    }

    BaseDialog .dialog-title {
        text-style: bold;
    }

    BaseDialog .dialog-content {
        height: auto;
        margin: 1 0;
    }

    BaseDialog .dialog-buttons {
        height: 3;
        align: center middle;
    }

    BaseDialog .dialog-buttons Button {
        margin: 0 1;
        min-width: 8;
    }
    """

    DIALOG_WIDTH = 60

    def __init__(self, title: str):
        super().__init__()
        self.title = title

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                container = Vertical(classes="dialog-container")
                container.styles.width = self.DIALOG_WIDTH
                with container:
                    yield Label(self.title, classes="dialog-title")
                    with Vertical(classes="dialog-content"):
                        yield from self.compose_content()
                    with Horizontal(classes="dialog-buttons"):
                        yield from self.compose_buttons()

    def compose_content(self) -> ComposeResult:
        yield from ()

    def compose_buttons(self) -> ComposeResult:
        yield Button("OK", variant="primary", id="ok-button")


class InputDialog(BaseDialog):
    """入力ダイアログ"""

    DIALOG_WIDTH = 70

    def __init__(self, title: str, prompt: str, default_value: str = ""):
        super().__init__(title)
        self.prompt = prompt
        self.default_value = default_value

    def compose_content(self) -> ComposeResult:
        yield Label(self.prompt)
        self.input_field = Input(value=self.default_value)
        yield self.input_field

    def compose_buttons(self) -> ComposeResult:
        yield Button("OK", variant="primary", id="ok-button")
        yield Button("Cancel", variant="default", id="cancel-button")

    def on_mount(self) -> None:
        self.input_field.focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok-button":
            self.dismiss(self.input_field.value.strip() or None)
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip() or None)

    def on_key(self, event) -> None:
        if event.key == "escape":
            self.dismiss(None)


class MessageDialog(BaseDialog):
    """メッセージダイアログ"""

    DIALOG_WIDTH = 80

    ICONS = {"success": "✓", "error": "✗", "warning": "⚠", "info": "ℹ"}
    COLORS = {"success": "green", "error": "red", "warning": "yellow", "info": "blue"}

    def __init__(
        self, title: str, message: Union[str, Text], message_type: str = "info"
    ):
        super().__init__(title)
        self.message = message
        self.message_type = message_type

    def compose_content(self) -> ComposeResult:
        body = Text()
        body.append(
            self.ICONS.get(self.message_type, "ℹ"),
            style=self.COLORS.get(self.message_type, "white"),
        )
        body.append(" ")
        # Text objectの場合はスタイルを保持
        if isinstance(self.message, Text):
            body.append_text(self.message)
        else:
            body.append(str(self.message))
        yield Label(body)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss()

    def on_key(self, event) -> None:
        if event.key in ("enter", "escape", "space"):
            self.dismiss()


class ProgressDialog(BaseDialog):
    """プログレスダイアログ（キャンセル可能）"""

    def __init__(
        self, title: str, message: str, on_cancel: Optional[Callable[[], None]] = None
    ):
        super().__init__(title)
        self.message = message
        self.on_cancel = on_cancel

    def compose_content(self) -> ComposeResult:
        yield Label(self.message, id="progress-message")
        self.progress_bar = ProgressBar(total=100, show_eta=False)
        yield self.progress_bar

    def compose_buttons(self) -> ComposeResult:
        yield Button("Cancel", variant="error", id="cancel-button")

    def update_progress(self, percentage: float, message: str = None):
        """プログレスを更新"""
        if not self.is_mounted:
            return
        self.progress_bar.update(progress=percentage)
        if message:
            self.query_one("#progress-message", Label).update(message)

    def _request_cancel(self) -> None:
        if self.on_cancel is not None:
            self.on_cancel()
        self.query_one("#progress-message", Label).update("Cancelling...")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel-button":
            self._request_cancel()

    def on_key(self, event) -> None:
        if event.key == "escape":
            self._request_cancel()
