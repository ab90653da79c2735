"""
Textual TUI for byteview
"""
