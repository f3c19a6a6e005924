"""Library statistics."""

from bookshelf.db.store import LibraryStore
from bookshelf.repositories.book_repo import BookRepository
from bookshelf.repositories.list_repo import ListRepository
from bookshelf.schemas.backup import LibraryStats


class StatsService:
    """Aggregate counts for the settings and library screens."""

    def __init__(self, store: LibraryStore):
        self.store = store

    async def get_library_stats(self) -> LibraryStats:
        async with self.store.read() as session:
            lists = ListRepository(session)
            books = BookRepository(session)
            return LibraryStats(
                total_lists=await lists.count(),
                custom_lists=await lists.count(list_type="custom"),
                total_books=await books.count(),
                books_with_rating=await books.count_rated(),
                books_with_notes=await books.count_with_notes(),
            )
