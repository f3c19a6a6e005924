"""Bookshelf - local-first reading library store with JSON backup and merge."""

__version__ = "0.2.0"
