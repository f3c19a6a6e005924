"""Database package."""

from bookshelf.db.changes import ChangeFeed
from bookshelf.db.session import create_engine, create_session_factory
from bookshelf.db.store import LibraryStore

__all__ = ["LibraryStore", "ChangeFeed", "create_engine", "create_session_factory"]
