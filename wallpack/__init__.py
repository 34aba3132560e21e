"""Wallpaper pack assembler."""

__version__ = "0.1.0"
