"""Repository package for data access."""

from bookshelf.repositories.book_repo import BookRepository
from bookshelf.repositories.list_book_repo import ListBookRepository
from bookshelf.repositories.list_repo import ListRepository

__all__ = [
    "ListRepository",
    "BookRepository",
    "ListBookRepository",
]
