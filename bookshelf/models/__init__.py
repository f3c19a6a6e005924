"""SQLAlchemy models package."""

from bookshelf.models.base import SYNC_STATUSES, Base, now_ms
from bookshelf.models.list_book import ListBook
from bookshelf.models.reading_list import LIST_TYPES, ReadingList, SystemListId
from bookshelf.models.saved_book import (
    SavedBook,
    progress_from_pages,
    sanitize_author_names,
)

__all__ = [
    "Base",
    "now_ms",
    "SYNC_STATUSES",
    "LIST_TYPES",
    "ReadingList",
    "SystemListId",
    "SavedBook",
    "ListBook",
    "progress_from_pages",
    "sanitize_author_names",
]
