"""Core utilities package."""

from bookshelf.core.exceptions import (
    InvalidDocumentShapeError,
    LibraryError,
    MalformedDocumentError,
    NotFoundError,
    ProtectedResourceError,
    StorageError,
    UnsupportedVersionError,
    ValidationError,
)

__all__ = [
    "LibraryError",
    "ValidationError",
    "ProtectedResourceError",
    "MalformedDocumentError",
    "UnsupportedVersionError",
    "InvalidDocumentShapeError",
    "NotFoundError",
    "StorageError",
]
