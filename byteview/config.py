#!/usr/bin/env python3
"""
byteview - 設定管理モジュール
"""

import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core.decoder import DataTypeMode, Decoder
from .core.file_loader import FileLoader
from .core.view_coordinator import DEFAULT_PAGE_SIZE, ViewCoordinator
from .utils import get_byteview_dir


# --- Settings Key Definitions ---
# Each key defines: type, default, required, description, and optional choices/validation
SETTINGS_KEYS: Dict[str, Dict[str, Any]] = {
    "max_file_size_mb": {
        "type": "number",
        "default": 10.0,
        "required": False,
        "description": "Maximum file size in MB (0 = no limit)",
        "path": ["config", "max_file_size_mb"],
    },
    "viewer.page_size": {
        "type": "integer",
        "default": DEFAULT_PAGE_SIZE,
        "required": False,
        "description": "Bytes shown per page",
        "path": ["config", "viewer", "page_size"],
    },
    "viewer.default_mode": {
        "type": "enum",
        "default": DataTypeMode.BYTES.value,
        "required": False,
        "description": "Data type used when the viewer starts",
        "choices": DataTypeMode.choices(),
        "path": ["config", "viewer", "default_mode"],
    },
    "decoder.chunk_size": {
        "type": "integer",
        "default": 600,
        "required": False,
        "description": "Decoded units per output chunk",
        "path": ["config", "decoder", "chunk_size"],
    },
    "decoder.yield_every": {
        "type": "integer",
        "default": 100,
        "required": False,
        "description": "Decoded units between cooperative pauses",
        "path": ["config", "decoder", "yield_every"],
    },
    "decoder.yield_delay_ms": {
        "type": "number",
        "default": 1.0,
        "required": False,
        "description": "Length of each cooperative pause in milliseconds",
        "path": ["config", "decoder", "yield_delay_ms"],
    },
    "tui.theme": {
        "type": "enum",
        "default": None,
        "required": False,
        "description": "TUI color theme",
        "choices": ["nord", "gruvbox", "textual-dark", "textual-light"],
        "path": ["config", "tui", "theme"],
    },
    "tui.poll_interval_ms": {
        "type": "integer",
        "default": 20,
        "required": False,
        "description": "Progress bar refresh interval in milliseconds",
        "path": ["config", "tui", "poll_interval_ms"],
    },
}


@dataclass
class ViewerConfig:
    """表示設定"""

    page_size: int = DEFAULT_PAGE_SIZE
    default_mode: str = DataTypeMode.BYTES.value


@dataclass
class DecoderConfig:
    """デコーダー設定"""

    chunk_size: int = 600
    yield_every: int = 100
    yield_delay_ms: float = 1.0


@dataclass
class TUIConfig:
    """TUI設定"""

    theme: Optional[str] = None  # テーマ名（例: "nord", "gruvbox", "textual-dark"）
    poll_interval_ms: int = 20


@dataclass
class Config:
    """byteviewの設定"""

    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    tui: TUIConfig = field(default_factory=TUIConfig)
    max_file_size_mb: float = 10.0  # デフォルト10MB

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Config":
        """辞書からConfigオブジェクトを作成"""
        config_data = (data or {}).get("config") or {}

        viewer_data = config_data.get("viewer") or {}
        viewer = ViewerConfig(
            page_size=viewer_data.get("page_size", DEFAULT_PAGE_SIZE),
            default_mode=viewer_data.get("default_mode", DataTypeMode.BYTES.value),
        )

        decoder_data = config_data.get("decoder") or {}
        decoder = DecoderConfig(
            chunk_size=decoder_data.get("chunk_size", 600),
            yield_every=decoder_data.get("yield_every", 100),
            yield_delay_ms=decoder_data.get("yield_delay_ms", 1.0),
        )

        tui_data = config_data.get("tui") or {}
        tui = TUIConfig(
            theme=tui_data.get("theme"),
            poll_interval_ms=tui_data.get("poll_interval_ms", 20),
        )

        return cls(
            viewer=viewer,
            decoder=decoder,
            tui=tui,
            max_file_size_mb=config_data.get("max_file_size_mb", 10.0),
        )

    def to_dict(self) -> dict:
        return {
            "config": {
                "max_file_size_mb": self.max_file_size_mb,
                "viewer": {
                    "page_size": self.viewer.page_size,
                    "default_mode": self.viewer.default_mode,
                },
                "decoder": {
                    "chunk_size": self.decoder.chunk_size,
                    "yield_every": self.decoder.yield_every,
                    "yield_delay_ms": self.decoder.yield_delay_ms,
                },
                "tui": {
                    "theme": self.tui.theme,
                    "poll_interval_ms": self.tui.poll_interval_ms,
                },
            }
        }


class ConfigManager:
    """設定ファイルの管理クラス

    A missing config file is not an error: every setting falls back to its
    default until something is written.
    """

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None:
            config_path = get_byteview_dir() / "config.yml"
        self.config_path = Path(config_path)
        self._config = None

    def load_config(self) -> Config:
        """設定ファイルを読み込み"""
        self._config = Config.from_dict(self._load_raw_config())
        return self._config

    @property
    def config(self) -> Config:
        """設定オブジェクトを取得（遅延読み込み）"""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def validate_config(self) -> List[str]:
        """設定の妥当性をチェック"""
        errors = []
        warnings = []
        config = self.config

        if not self.config_path.exists():
            warnings.append(f"iNo config file at {self.config_path}, using defaults")

        if not _is_positive_int(config.viewer.page_size):
            errors.append(
                f"✗viewer.page_size must be a positive integer: {config.viewer.page_size}"
            )

        if config.viewer.default_mode not in DataTypeMode.choices():
            errors.append(
                f"✗viewer.default_mode '{config.viewer.default_mode}' is not one of: "
                f"{', '.join(DataTypeMode.choices())}"
            )

        if not _is_positive_int(config.decoder.chunk_size):
            errors.append(
                f"✗decoder.chunk_size must be a positive integer: {config.decoder.chunk_size}"
            )

        if not _is_positive_int(config.decoder.yield_every):
            errors.append(
                f"✗decoder.yield_every must be a positive integer: {config.decoder.yield_every}"
            )

        if not _is_number(config.decoder.yield_delay_ms) or config.decoder.yield_delay_ms < 0:
            errors.append(
                f"✗decoder.yield_delay_ms must be zero or more: {config.decoder.yield_delay_ms}"
            )

        if not _is_positive_int(config.tui.poll_interval_ms):
            errors.append(
                f"✗tui.poll_interval_ms must be a positive integer: {config.tui.poll_interval_ms}"
            )
        elif config.tui.poll_interval_ms > 1000:
            warnings.append(
                f"!tui.poll_interval_ms is {config.tui.poll_interval_ms}ms, progress will update slowly"
            )

        if not _is_number(config.max_file_size_mb) or config.max_file_size_mb < 0:
            errors.append(
                f"✗max_file_size_mb must be zero or more: {config.max_file_size_mb}"
            )
        elif config.max_file_size_mb > 0:
            warnings.append(
                f"iFile size limit: {config.max_file_size_mb}MB (larger files are refused)"
            )
        else:
            warnings.append("!No file size limit: very large files are loaded into memory")

        return warnings + errors

    def get_validation_errors(self) -> List[str]:
        """エラーのみを取得（警告・情報は除外）"""
        return [result for result in self.validate_config() if result.startswith("✗")]

    def backup_config_file(self) -> Optional[Path]:
        """
        Backup config file to archives/config/{timestamp}/ directory.

        Returns:
            Path to backup file, or None if config doesn't exist
        """
        if not self.config_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        archive_dir = get_byteview_dir() / "archives" / "config" / timestamp
        archive_dir.mkdir(parents=True, exist_ok=True)

        backup_path = archive_dir / self.config_path.name
        shutil.copy2(self.config_path, backup_path)
        return backup_path

    def _load_raw_config(self) -> dict:
        """Load config as raw dict ({'config': {}} when the file is missing).

        Raises:
            ValueError: The file is not valid YAML or not a mapping.
        """
        if not self.config_path.exists():
            return {"config": {}}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            return {"config": {}}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {self.config_path}")
        return data

    def _save_raw_config(self, data: dict) -> None:
        """Save raw config dict to YAML file (preserves key order)."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                width=120,
                sort_keys=False,
            )

    # --- Settings Management Methods ---

    def _parse_setting_value(self, key: str, value: str) -> tuple[bool, Any, str]:
        """
        Parse and validate a setting value based on its type definition.

        Args:
            key: Setting key name
            value: String value to parse

        Returns:
            Tuple of (is_valid, parsed_value, error_message)
        """
        if key not in SETTINGS_KEYS:
            return (False, None, f"Unknown setting key: {key}")

        key_def = SETTINGS_KEYS[key]
        key_type = key_def["type"]

        try:
            if key_type == "number":
                parsed = float(value)
                if parsed < 0:
                    return (False, None, f"Value must be zero or more: {value}")
                return (True, parsed, "")

            elif key_type == "integer":
                parsed = int(value)
                if parsed <= 0:
                    return (False, None, f"Value must be a positive integer: {value}")
                return (True, parsed, "")

            elif key_type == "enum":
                choices = key_def.get("choices", [])
                if value in choices:
                    return (True, value, "")
                elif (value.lower() == "null" or value == "") and not key_def["default"]:
                    return (True, None, "")
                else:
                    return (
                        False,
                        None,
                        f"Invalid value: {value} (choices: {', '.join(choices)})",
                    )

            else:
                return (False, None, f"Unknown type: {key_type}")

        except ValueError as e:
            return (False, None, f"Invalid value: {e}")

    def _get_nested_value(self, data: dict, path: list) -> Any:
        """Get a value from nested dict using path list."""
        current = data
        for key in path:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
        return current

    def _set_nested_value(self, data: dict, path: list, value: Any) -> None:
        """Set a value in nested dict using path list, creating intermediate dicts."""
        current = data
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _delete_nested_value(self, data: dict, path: list) -> bool:
        """Delete a value from nested dict using path list. Returns True if deleted."""
        current = data
        for key in path[:-1]:
            if not isinstance(current, dict) or key not in current:
                return False
            current = current[key]
        if isinstance(current, dict) and path[-1] in current:
            del current[path[-1]]
            return True
        return False

    def get_setting(self, key: str) -> dict:
        """
        Get a setting value.

        Args:
            key: Setting key (e.g., 'max_file_size_mb', 'viewer.page_size')

        Returns:
            dict with 'success', 'key', 'value', 'default', 'type', 'description'
        """
        if key not in SETTINGS_KEYS:
            return _unknown_key(key)

        key_def = SETTINGS_KEYS[key]
        current_value = self._get_nested_value(self._load_raw_config(), key_def["path"])
        if current_value is None:
            current_value = key_def["default"]

        return {
            "success": True,
            "key": key,
            "value": current_value,
            "default": key_def["default"],
            "type": key_def["type"],
            "description": key_def["description"],
            "choices": key_def.get("choices"),
            "required": key_def["required"],
        }

    def set_setting(self, key: str, value: str, backup: bool = True) -> dict:
        """
        Set a setting value.

        Args:
            key: Setting key
            value: Value to set (as string, will be parsed based on type)
            backup: Whether to backup config before modifying

        Returns:
            dict with 'success', 'message', 'changed', and optionally 'backup_path'
        """
        if key not in SETTINGS_KEYS:
            return _unknown_key(key)

        key_def = SETTINGS_KEYS[key]

        is_valid, parsed_value, error_msg = self._parse_setting_value(key, value)
        if not is_valid:
            return {"success": False, "message": error_msg}

        raw_data = self._load_raw_config()
        current_value = self._get_nested_value(raw_data, key_def["path"])
        if current_value == parsed_value:
            return {
                "success": True,
                "message": f"Setting already has value: {key} = {parsed_value}",
                "changed": False,
                "key": key,
                "value": parsed_value,
            }

        backup_path = self.backup_config_file() if backup else None

        self._set_nested_value(raw_data, key_def["path"], parsed_value)
        self._save_raw_config(raw_data)
        self._config = None

        result = {
            "success": True,
            "message": f"Set {key} = {parsed_value}",
            "changed": True,
            "key": key,
            "value": parsed_value,
        }
        if backup_path:
            result["backup_path"] = backup_path

        return result

    def unset_setting(self, key: str, backup: bool = True) -> dict:
        """
        Unset a setting (reset to default by removing from config).

        Returns:
            dict with 'success', 'message', 'changed', and optionally 'backup_path'
        """
        if key not in SETTINGS_KEYS:
            return _unknown_key(key)

        key_def = SETTINGS_KEYS[key]
        raw_data = self._load_raw_config()
        if self._get_nested_value(raw_data, key_def["path"]) is None:
            return {
                "success": True,
                "message": f"Setting already unset: {key} (default: {key_def['default']})",
                "changed": False,
                "key": key,
                "default": key_def["default"],
            }

        backup_path = self.backup_config_file() if backup else None

        self._delete_nested_value(raw_data, key_def["path"])
        self._save_raw_config(raw_data)
        self._config = None

        result = {
            "success": True,
            "message": f"Unset {key} (reset to default: {key_def['default']})",
            "changed": True,
            "key": key,
            "default": key_def["default"],
        }
        if backup_path:
            result["backup_path"] = backup_path

        return result

    def list_settings(self) -> dict:
        """
        List all available settings with their current values.

        Returns:
            dict with 'success', 'settings' (list of setting info dicts)
        """
        raw_data = self._load_raw_config()
        settings_list = []

        for key, key_def in SETTINGS_KEYS.items():
            current_value = self._get_nested_value(raw_data, key_def["path"])
            is_default = current_value is None

            settings_list.append(
                {
                    "key": key,
                    "value": current_value if not is_default else key_def["default"],
                    "default": key_def["default"],
                    "is_default": is_default,
                    "type": key_def["type"],
                    "description": key_def["description"],
                    "required": key_def["required"],
                    "choices": key_def.get("choices"),
                }
            )

        return {"success": True, "settings": settings_list}


def _unknown_key(key: str) -> dict:
    return {
        "success": False,
        "message": f"Unknown setting key: {key}",
        "available_keys": list(SETTINGS_KEYS),
    }


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def create_view_coordinator(
    config: Config, mode: Optional[str] = None
) -> ViewCoordinator:
    """Build a ViewCoordinator wired to the configured decoder and loader.

    Args:
        config: Loaded configuration.
        mode: Initial data type, overriding viewer.default_mode.

    Raises:
        ValueError: the config holds an invalid mode or size.
    """
    decoder = Decoder(
        chunk_size=config.decoder.chunk_size,
        yield_every=config.decoder.yield_every,
        yield_delay=config.decoder.yield_delay_ms / 1000,
    )
    return ViewCoordinator(
        page_size=config.viewer.page_size,
        mode=DataTypeMode.from_value(mode or config.viewer.default_mode),
        decoder=decoder,
        file_loader=FileLoader(config.max_file_size_mb),
    )


def create_default_config(output_path: str, force: bool = False) -> Path:
    """
    デフォルトの設定ファイルを生成

    Raises:
        FileExistsError: ファイルが既に存在し、forceがFalseの場合
    """
    path = Path(output_path).expanduser()
    if path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# byteview configuration\n")
        f.write(f"# Data types: {', '.join(DataTypeMode.choices())}\n")
        yaml.dump(
            Config().to_dict(),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    return path
