"""Pydantic schemas package."""

from bookshelf.schemas.backup import (
    BookRecord,
    ImportMode,
    ImportResult,
    LibraryExport,
    LibraryStats,
    ListBookRecord,
    ListRecord,
)
from bookshelf.schemas.common import ErrorDetail, ErrorResponse
from bookshelf.schemas.library import (
    AddBookResult,
    BookInput,
    BookListsResponse,
    CurrentPageUpdate,
    ListBookResponse,
    ListCreate,
    ListUpdate,
    ListWithCount,
    NotesUpdate,
    PagesUpdate,
    ProgressUpdate,
    RatingUpdate,
    ReadingListResponse,
    SavedBookResponse,
    ToggleResult,
)

__all__ = [
    # Common
    "ErrorDetail",
    "ErrorResponse",
    # Library
    "BookInput",
    "ListCreate",
    "ListUpdate",
    "RatingUpdate",
    "ProgressUpdate",
    "NotesUpdate",
    "PagesUpdate",
    "CurrentPageUpdate",
    "ReadingListResponse",
    "ListWithCount",
    "SavedBookResponse",
    "ListBookResponse",
    "AddBookResult",
    "ToggleResult",
    "BookListsResponse",
    # Backup
    "ImportMode",
    "ListRecord",
    "BookRecord",
    "ListBookRecord",
    "LibraryExport",
    "ImportResult",
    "LibraryStats",
]
