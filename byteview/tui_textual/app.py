"""
Main Textual application for the byteview TUI
"""

from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.command import Hit, Hits, Provider
from textual.widgets import Footer, Header

from ..__version__ import get_version
from ..core.decoder import DataTypeMode
from .constants import MODE_KEYS
from .screens.main_screen import MainScreen
from .widgets.dialogs import MessageDialog
from .widgets.status_bar import StatusBar


class ByteViewCommandProvider(Provider):
    """Command palette entries for byteview."""

    async def search(self, query: str) -> Hits:
        """Search commands."""
        matcher = self.matcher(query)

        commands = [
            ("Load File", self.app.action_open_file, "Load a file into the viewer"),
            ("First Page", self.app.action_first_page, "Go back to page 1"),
            ("Next Page", self.app.action_next_page, "Show the next page"),
            ("Previous Page", self.app.action_prev_page, "Show the previous page"),
            ("Redraw Page", self.app.action_refresh_page, "Render the current page again"),
            (
                "Cancel Rendering",
                self.app.action_cancel_render,
                "Stop the view currently being rendered",
            ),
            ("Show Help", self.app.action_show_help, "Show keyboard shortcuts"),
        ]
        for mode in DataTypeMode:
            commands.append(
                (
                    mode.label,
                    lambda mode=mode: self.app.action_set_mode(mode.value),
                    f"Show the page as {mode.label}",
                )
            )

        for command_name, callback, help_text in commands:
            score = matcher.match(command_name)
            if score > 0:
                yield Hit(
                    score, matcher.highlight(command_name), callback, help=help_text
                )


class ByteViewApp(App):
    """byteview メインアプリケーション"""

    COMMANDS = App.COMMANDS | {ByteViewCommandProvider}

    BINDINGS = [
        # システム
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False),
        Binding("?", "show_help", "Help"),
        # ファイル
        Binding("o", "open_file", "Open"),
        # 表示モード（フッターには表示しない）
        *[
            Binding(key, f"set_mode('{mode.value}')", mode.label, show=False)
            for key, mode in MODE_KEYS.items()
        ],
        # ページ移動
        Binding("n", "next_page", "Next"),
        Binding("right", "next_page", "Next", show=False),
        Binding("p", "prev_page", "Prev"),
        Binding("left", "prev_page", "Prev", show=False),
        Binding("g", "first_page", "First"),
        Binding("home", "first_page", "First", show=False),
        Binding("r", "refresh_page", "Redraw"),
        Binding("escape", "cancel_render", "Cancel", show=False),
    ]

    def __init__(self, file_path: Optional[str] = None):
        super().__init__()
        self.file_path = file_path

    def compose(self) -> ComposeResult:
        """アプリケーションのレイアウトを構成"""
        header = Header()
        header.tall = True
        yield header
        self.main_screen = MainScreen(file_path=self.file_path)
        yield self.main_screen
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        """アプリケーション起動時の初期化"""
        self.title = f"byteview {get_version()}"
        self.sub_title = "Paginated byte viewer"

    def action_show_help(self) -> None:
        """ヘルプを表示"""
        help_text = Text()

        def section(title: str) -> None:
            help_text.append(f"\n{title}\n", style="bold cyan")

        def key_line(key: str, desc: str) -> None:
            help_text.append(f"  {key:<10}", style="bold green")
            help_text.append(f"{desc}\n")

        help_text.append("Keyboard Shortcuts\n", style="bold")

        section("File")
        key_line("o", "Load a file")

        section("Data Types")
        for key, mode in MODE_KEYS.items():
            key_line(key, mode.label)

        section("Pages")
        key_line("n / →", "Next page")
        key_line("p / ←", "Previous page")
        key_line("g / Home", "First page")
        key_line("r", "Render the current page again")
        key_line("Esc", "Cancel rendering")

        section("System")
        key_line("Ctrl+P", "Command palette")
        key_line("?", "Show this help")
        key_line("q", "Quit")

        self.push_screen(MessageDialog("Help", help_text, "info"))

    def action_open_file(self) -> None:
        """ファイル読み込みダイアログを開く"""
        self.main_screen.prompt_open_file()

    def action_set_mode(self, value: str) -> None:
        """データ種別を切り替え"""
        self.main_screen.change_mode(DataTypeMode.from_value(value))

    def action_next_page(self) -> None:
        self.main_screen.show_page("next")

    def action_prev_page(self) -> None:
        self.main_screen.show_page("prev")

    def action_first_page(self) -> None:
        self.main_screen.show_page("first")

    def action_refresh_page(self) -> None:
        """現在のページを再描画"""
        self.main_screen.show_page("current")

    def action_cancel_render(self) -> None:
        """描画中の処理をキャンセル"""
        self.main_screen.cancel_render()


def run_textual_tui(file_path: Optional[str] = None):
    """Textual TUIを実行"""
    app = ByteViewApp(file_path=file_path)
    app.run()
