"""
TUI-specific adapters for byteview
Wraps the view coordinator for the TUI presentation layer
"""

from .view_adapter import TUIViewAdapter as TUIViewAdapter

__all__ = ["TUIViewAdapter"]
