#!/usr/bin/env python3
"""
Utility functions for byteview
"""

import os
from pathlib import Path


def get_byteview_dir() -> Path:
    """byteviewディレクトリのパスを取得（環境変数対応）

    Returns:
        Path: byteviewディレクトリのパス（絶対パス・解決済み）

    Note:
        BYTEVIEW_DIR環境変数が設定されている場合はそれを使用、
        未設定の場合は~/.config/byteviewを使用
    """
    return Path(os.getenv("BYTEVIEW_DIR", "~/.config/byteview")).expanduser().resolve()


def set_byteview_dir(byteview_dir: str) -> Path:
    """Point BYTEVIEW_DIR at another directory for the current process."""
    resolved_path = Path(byteview_dir).expanduser().resolve()
    os.environ["BYTEVIEW_DIR"] = str(resolved_path)
    return resolved_path


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
