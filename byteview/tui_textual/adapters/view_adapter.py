"""
View adapter for the TUI

Builds a ViewCoordinator from the user's configuration and runs every view
action on the coordinator's worker thread, handing back RenderHandles the
screen can watch.
"""

from typing import List, Optional

from ...config import Config, ConfigManager, create_view_coordinator
from ...core.decoder import DataTypeMode
from ...core.view_coordinator import RenderHandle, ViewCoordinator


class TUIViewAdapter:
    """TUI向けのビューアダプター

    Attributes:
        config: Effective configuration (defaults when the file is invalid).
        config_errors: Validation errors found in the config file.
        coordinator: The single ViewCoordinator owned by this TUI session.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.config_manager = config_manager or ConfigManager()
        try:
            self.config_errors: List[str] = [
                error[1:] for error in self.config_manager.get_validation_errors()
            ]
        except (ValueError, OSError) as e:
            self.config_errors = [str(e)]

        # 設定エラー時はデフォルト設定で起動する
        self.config: Config = Config() if self.config_errors else self.config_manager.config
        self.coordinator: ViewCoordinator = create_view_coordinator(self.config)

    @property
    def poll_interval(self) -> float:
        """Progress poll interval in seconds."""
        return self.config.tui.poll_interval_ms / 1000

    @property
    def mode(self) -> DataTypeMode:
        return self.coordinator.mode

    def open_file(self, path: str) -> RenderHandle:
        return self.coordinator.submit(self.coordinator.load_file, path)

    def change_mode(self, mode: DataTypeMode) -> RenderHandle:
        return self.coordinator.submit(self.coordinator.change_mode, mode)

    def show_page(self, direction: str) -> RenderHandle:
        """direction: 'first', 'next', 'prev' or 'current' (render again)."""
        actions = {
            "first": self.coordinator.first_page,
            "next": self.coordinator.next_page,
            "prev": self.coordinator.prev_page,
            "current": self.coordinator.refresh,
        }
        if direction not in actions:
            raise ValueError(f"Unknown page direction: {direction}")
        return self.coordinator.submit(actions[direction])

    def shutdown(self) -> None:
        self.coordinator.shutdown()
