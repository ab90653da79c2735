"""
Widgets for the byteview TUI
"""
