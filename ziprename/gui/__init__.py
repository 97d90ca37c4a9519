"""
gui - PySide6 Interface for the ZIP Rename Tool
"""

from .gui_entry import main

__all__ = ["main"]
