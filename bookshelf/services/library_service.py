"""Library service: reading lists, saved books and list membership."""

from collections.abc import AsyncIterator

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.config import settings
from bookshelf.core.exceptions import NotFoundError, ProtectedResourceError
from bookshelf.db.store import LibraryStore
from bookshelf.models.base import now_ms
from bookshelf.models.list_book import ListBook
from bookshelf.models.reading_list import ReadingList, SystemListId
from bookshelf.models.saved_book import SavedBook, clamp, progress_from_pages
from bookshelf.repositories.book_repo import BookRepository
from bookshelf.repositories.list_book_repo import ListBookRepository
from bookshelf.repositories.list_repo import ListRepository
from bookshelf.schemas.library import (
    AddBookResult,
    BookInput,
    ListBookResponse,
    ListWithCount,
    ReadingListResponse,
    SavedBookResponse,
)

logger = structlog.get_logger(__name__)

LISTS_TABLE = ReadingList.__tablename__
BOOKS_TABLE = SavedBook.__tablename__
LIST_BOOKS_TABLE = ListBook.__tablename__


async def require_list(session: AsyncSession, list_id: str) -> ReadingList:
    reading_list = await ListRepository(session).get_by_id(list_id)
    if not reading_list:
        raise NotFoundError("Reading list", list_id)
    return reading_list


async def require_book(session: AsyncSession, book_id: str) -> SavedBook:
    book = await BookRepository(session).get_by_id(book_id)
    if not book:
        raise NotFoundError("Book", book_id)
    return book


async def save_book_in(session: AsyncSession, data: BookInput) -> tuple[SavedBook, bool]:
    """Get-or-create by work key inside an open write scope.

    Returns the book and whether it was created.
    """
    books = BookRepository(session)
    existing = await books.get_by_work_key(data.work_key)
    if existing:
        return existing, False

    book = await books.create(
        work_key=data.work_key,
        title=data.title,
        author_names=data.author_names,
        cover_url=data.cover_url,
        first_publish_year=data.first_publish_year,
    )
    return book, True


async def add_to_list_in(session: AsyncSession, book: SavedBook, list_id: str) -> tuple[ListBook, bool]:
    """Ensure one membership row for (list, book), appended at the end."""
    await require_list(session, list_id)

    list_books = ListBookRepository(session)
    existing = await list_books.find(list_id, book.id)
    if existing:
        return existing[0], False

    return await list_books.create(list_id=list_id, book_id=book.id), True


class LibraryService:
    """Service for reading lists, saved books and their membership.

    Every mutation runs in one write scope of the injected store, so
    multi-row changes (list deletion, finishing a book) are atomic.
    """

    def __init__(self, store: LibraryStore, auto_finish_on_complete: bool | None = None):
        self.store = store
        self.auto_finish_on_complete = (
            settings.auto_finish_on_complete
            if auto_finish_on_complete is None
            else auto_finish_on_complete
        )

    # ==================== READING LISTS ====================

    async def get_all_lists(self) -> list[ReadingListResponse]:
        """All lists ordered by sort order."""
        async with self.store.read() as session:
            lists = await ListRepository(session).list_all()
            return [ReadingListResponse.model_validate(item) for item in lists]

    async def get_list(self, list_id: str) -> ReadingListResponse:
        async with self.store.read() as session:
            return ReadingListResponse.model_validate(await require_list(session, list_id))

    async def get_lists_with_counts(self) -> list[ListWithCount]:
        async with self.store.read() as session:
            rows = await ListRepository(session).list_with_counts()
            return [
                ListWithCount(
                    **ReadingListResponse.model_validate(reading_list).model_dump(),
                    book_count=count,
                )
                for reading_list, count in rows
            ]

    async def create_list(
        self,
        name: str,
        icon: str = "folder",
        color: str = "#607D8B",
    ) -> ReadingListResponse:
        """Create a custom list after the last one. ``name`` is validated by callers."""
        async with self.store.write() as session:
            reading_list = await ListRepository(session).create(
                name=name,
                list_type="custom",
                icon=icon,
                color=color,
            )
            logger.info("List created", list_id=reading_list.id, sort_order=reading_list.sort_order)
            return ReadingListResponse.model_validate(reading_list)

    async def update_list(
        self,
        list_id: str,
        name: str | None = None,
        icon: str | None = None,
        color: str | None = None,
    ) -> ReadingListResponse:
        """Update list attributes. System lists can be renamed and restyled too."""
        async with self.store.write() as session:
            reading_list = await require_list(session, list_id)
            if name is not None:
                reading_list.name = name
            if icon is not None:
                reading_list.icon = icon
            if color is not None:
                reading_list.color = color
            reading_list.mark_pending()
            await session.flush()

            logger.info("List updated", list_id=list_id)
            return ReadingListResponse.model_validate(reading_list)

    async def delete_list(self, list_id: str) -> None:
        """Delete a custom list and its memberships in one transaction."""
        async with self.store.write() as session:
            reading_list = await require_list(session, list_id)
            if reading_list.is_system_list:
                logger.warning("Refused to delete system list", list_id=list_id)
                raise ProtectedResourceError("Reading list", list_id)

            removed = await ListBookRepository(session).delete_for_list(list_id)
            await ListRepository(session).delete(reading_list)

        logger.info("List deleted", list_id=list_id, memberships_removed=removed)

    # ==================== SAVED BOOKS ====================

    async def get_book(self, book_id: str) -> SavedBookResponse:
        async with self.store.read() as session:
            return SavedBookResponse.model_validate(await require_book(session, book_id))

    async def get_book_by_work_key(self, work_key: str) -> SavedBookResponse | None:
        async with self.store.read() as session:
            book = await BookRepository(session).get_by_work_key(work_key)
            return SavedBookResponse.model_validate(book) if book else None

    async def get_all_books(self) -> list[SavedBookResponse]:
        """All saved books, newest first."""
        async with self.store.read() as session:
            books = await BookRepository(session).list_all()
            return [SavedBookResponse.model_validate(book) for book in books]

    async def get_total_books_count(self) -> int:
        async with self.store.read() as session:
            return await BookRepository(session).count()

    async def save_book(self, data: BookInput) -> SavedBookResponse:
        """Return the book cached for ``data.work_key``, creating it if needed."""
        async with self.store.write() as session:
            book, created = await save_book_in(session, data)
            if created:
                logger.info("Book saved", book_id=book.id, work_key=book.work_key)
            return SavedBookResponse.model_validate(book)

    async def delete_book(self, book_id: str) -> None:
        """Delete a book together with all of its memberships."""
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            removed = await ListBookRepository(session).delete_for_book(book_id)
            await BookRepository(session).delete(book)

        logger.info("Book deleted", book_id=book_id, memberships_removed=removed)

    async def set_book_rating(self, book_id: str, rating: int) -> SavedBookResponse:
        """Set the user rating, clamped to 0-5."""
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.user_rating = clamp(rating, 0, 5)
            book.mark_pending()
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def set_book_progress(self, book_id: str, progress: int) -> SavedBookResponse:
        """Set reading progress, clamped to 0-100."""
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.reading_progress = clamp(progress, 0, 100)
            book.mark_pending()
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def set_book_notes(self, book_id: str, notes: str) -> SavedBookResponse:
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.notes = notes
            book.mark_pending()
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def mark_list_synced(self, list_id: str, server_id: str) -> ReadingListResponse:
        """Record that a list was reconciled with the server."""
        async with self.store.write() as session:
            reading_list = await require_list(session, list_id)
            reading_list.mark_synced(server_id)
            await session.flush()
            return ReadingListResponse.model_validate(reading_list)

    async def mark_book_synced(self, book_id: str, server_id: str) -> SavedBookResponse:
        """Record that a book was reconciled with the server."""
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.mark_synced(server_id)
            await session.flush()
            return SavedBookResponse.model_validate(book)

    # ==================== READING PROGRESS ====================

    async def set_book_pages(
        self,
        book_id: str,
        total_pages: int,
        current_page: int = 0,
    ) -> SavedBookResponse:
        """Enable page tracking and derive progress from the page ratio."""
        total = max(1, total_pages)
        current = clamp(current_page, 0, total)

        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.total_pages = total
            book.current_page = current
            book.reading_progress = progress_from_pages(current, total)
            book.mark_pending()
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def update_current_page(self, book_id: str, current_page: int) -> SavedBookResponse:
        """Move the bookmark; progress follows the book's total pages."""
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            total = book.total_pages or 0
            current = clamp(current_page, 0, total)

            book.current_page = current
            book.reading_progress = progress_from_pages(current, total)
            book.mark_pending()

            if self.auto_finish_on_complete and total > 0 and book.reading_progress >= 100:
                await self._finish_in(session, book)

            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def start_reading(self, book_id: str) -> SavedBookResponse:
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            book.reading_started_at = now_ms()
            book.mark_pending()
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def finish_reading(self, book_id: str) -> SavedBookResponse:
        """Mark a book finished and move it from "Reading" to "Read".

        The book update and the list move share one transaction, so a failure
        can never leave the book in neither list.
        """
        async with self.store.write() as session:
            book = await require_book(session, book_id)
            await self._finish_in(session, book)
            await session.flush()
            return SavedBookResponse.model_validate(book)

    async def _finish_in(self, session: AsyncSession, book: SavedBook) -> None:
        book.reading_finished_at = now_ms()
        book.reading_progress = 100
        if book.total_pages and not book.current_page:
            book.current_page = book.total_pages
        book.mark_pending()

        await ListBookRepository(session).delete_pair(SystemListId.READING, book.id)
        await add_to_list_in(session, book, SystemListId.READ)

        logger.info("Book finished", book_id=book.id)

    # ==================== LIST-BOOK ASSOCIATIONS ====================

    async def add_book_to_list(self, data: BookInput, list_id: str) -> AddBookResult:
        """Save the book if needed and make it a member of ``list_id``."""
        async with self.store.write() as session:
            book, _ = await save_book_in(session, data)
            list_book, created = await add_to_list_in(session, book, list_id)
            if created:
                logger.info("Book added to list", book_id=book.id, list_id=list_id)
            return AddBookResult(
                book=SavedBookResponse.model_validate(book),
                list_book=ListBookResponse.model_validate(list_book),
            )

    async def remove_book_from_list(self, book_id: str, list_id: str) -> int:
        """Remove every membership row for the pair.

        The book itself is kept even when no list references it any more.
        """
        async with self.store.write() as session:
            removed = await ListBookRepository(session).delete_pair(list_id, book_id)

        if removed:
            logger.info("Book removed from list", book_id=book_id, list_id=list_id)
        return removed

    async def toggle_book_in_list(self, data: BookInput, list_id: str) -> bool:
        """Remove the book if it is a member, else add it. Returns membership after."""
        async with self.store.write() as session:
            book = await BookRepository(session).get_by_work_key(data.work_key)
            if book:
                list_books = ListBookRepository(session)
                if await list_books.exists(list_id, book.id):
                    await list_books.delete_pair(list_id, book.id)
                    return False

            book, _ = await save_book_in(session, data)
            await add_to_list_in(session, book, list_id)
            return True

    async def is_book_in_list(self, work_key: str, list_id: str) -> bool:
        async with self.store.read() as session:
            book = await BookRepository(session).get_by_work_key(work_key)
            if not book:
                return False
            return await ListBookRepository(session).exists(list_id, book.id)

    async def is_book_in_reading_list(self, work_key: str) -> bool:
        return await self.is_book_in_list(work_key, SystemListId.READING)

    async def get_books_in_list(self, list_id: str) -> list[SavedBookResponse]:
        """Books in a list, in list order."""
        async with self.store.read() as session:
            books = await ListBookRepository(session).books_in_list(list_id)
            return [SavedBookResponse.model_validate(book) for book in books]

    async def get_lists_for_book(self, book_id: str) -> list[ReadingListResponse]:
        async with self.store.read() as session:
            lists = await ListBookRepository(session).lists_for_book(book_id)
            return [ReadingListResponse.model_validate(item) for item in lists]

    async def get_list_ids_for_book(self, work_key: str) -> list[str]:
        """Ids of lists containing the book; empty when it was never saved."""
        async with self.store.read() as session:
            return await self._list_ids_for_work_key(session, work_key)

    async def get_book_count_in_list(self, list_id: str) -> int:
        async with self.store.read() as session:
            return await ListBookRepository(session).count_in_list(list_id)

    @staticmethod
    async def _list_ids_for_work_key(session: AsyncSession, work_key: str) -> list[str]:
        book = await BookRepository(session).get_by_work_key(work_key)
        if not book:
            return []
        return await ListBookRepository(session).list_ids_for_book(book.id)

    # ==================== LIVE QUERIES ====================

    def observe_lists(self) -> AsyncIterator[list[ReadingListResponse]]:
        """Emit all lists now and after every change to the lists table."""

        async def fetch(session: AsyncSession) -> list[ReadingListResponse]:
            lists = await ListRepository(session).list_all()
            return [ReadingListResponse.model_validate(item) for item in lists]

        return self.store.observe(fetch, [LISTS_TABLE])

    def observe_books_in_list(self, list_id: str) -> AsyncIterator[list[SavedBookResponse]]:
        async def fetch(session: AsyncSession) -> list[SavedBookResponse]:
            books = await ListBookRepository(session).books_in_list(list_id)
            return [SavedBookResponse.model_validate(book) for book in books]

        return self.store.observe(fetch, [BOOKS_TABLE, LIST_BOOKS_TABLE])

    def observe_list_ids_for_book(self, work_key: str) -> AsyncIterator[list[str]]:
        async def fetch(session: AsyncSession) -> list[str]:
            return await self._list_ids_for_work_key(session, work_key)

        return self.store.observe(fetch, [BOOKS_TABLE, LIST_BOOKS_TABLE])
