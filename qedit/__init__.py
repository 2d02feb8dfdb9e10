"""Undo trees, undo files, colour themes and a file-tree model for a terminal text editor."""

__version__ = "0.1.0"
__all__ = ["undo", "undofile", "theme", "tree", "utils"]