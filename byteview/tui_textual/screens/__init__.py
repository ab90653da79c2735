"""
Textual screens for byteview TUI
"""

from .main_screen import MainScreen

__all__ = ["MainScreen"]
