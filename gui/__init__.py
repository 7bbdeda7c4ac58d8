"""
gui - PySide6 front-end for the Batch Rename Preview Tool
"""

from .gui_entry import main

__all__ = ["main"]
