"""List membership repository."""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.models.list_book import ListBook
from bookshelf.models.reading_list import ReadingList
from bookshelf.models.saved_book import SavedBook


class ListBookRepository:
    """Repository for list-book associations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, list_id: str, book_id: str) -> list[ListBook]:
        """All rows for a pair; normally zero or one."""
        stmt = select(ListBook).where(
            and_(
                ListBook.list_id == list_id,
                ListBook.book_id == book_id,
            )
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def exists(self, list_id: str, book_id: str) -> bool:
        stmt = select(func.count(ListBook.id)).where(
            and_(
                ListBook.list_id == list_id,
                ListBook.book_id == book_id,
            )
        )
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def next_sort_order(self, list_id: str) -> int:
        result = await self.db.execute(
            select(func.max(ListBook.sort_order)).where(ListBook.list_id == list_id)
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    async def create(
        self,
        list_id: str,
        book_id: str,
        sort_order: int | None = None,
        added_at: int | None = None,
    ) -> ListBook:
        """Create a membership row, appended to the end of the list by default."""
        if sort_order is None:
            sort_order = await self.next_sort_order(list_id)

        list_book = ListBook(
            list_id=list_id,
            book_id=book_id,
            sort_order=sort_order,
            local_sync_status="pending",
            server_id=None,
        )
        if added_at is not None:
            list_book.added_at = added_at

        self.db.add(list_book)
        await self.db.flush()
        return list_book

    async def delete_rows(self, rows: list[ListBook]) -> int:
        for row in rows:
            await self.db.delete(row)
        await self.db.flush()
        return len(rows)

    async def delete_pair(self, list_id: str, book_id: str) -> int:
        return await self.delete_rows(await self.find(list_id, book_id))

    async def delete_for_list(self, list_id: str) -> int:
        result = await self.db.execute(select(ListBook).where(ListBook.list_id == list_id))
        return await self.delete_rows(list(result.scalars().all()))

    async def delete_for_book(self, book_id: str) -> int:
        result = await self.db.execute(select(ListBook).where(ListBook.book_id == book_id))
        return await self.delete_rows(list(result.scalars().all()))

    async def list_all(self) -> list[ListBook]:
        result = await self.db.execute(
            select(ListBook).order_by(ListBook.list_id, ListBook.sort_order)
        )
        return list(result.scalars().all())

    async def books_in_list(self, list_id: str) -> list[SavedBook]:
        """Books in a list, in list order."""
        stmt = (
            select(SavedBook)
            .join(ListBook, ListBook.book_id == SavedBook.id)
            .where(ListBook.list_id == list_id)
            .order_by(ListBook.sort_order.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def lists_for_book(self, book_id: str) -> list[ReadingList]:
        stmt = (
            select(ReadingList)
            .join(ListBook, ListBook.list_id == ReadingList.id)
            .where(ListBook.book_id == book_id)
            .order_by(ReadingList.sort_order.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_ids_for_book(self, book_id: str) -> list[str]:
        result = await self.db.execute(
            select(ListBook.list_id).where(ListBook.book_id == book_id)
        )
        return list(result.scalars().all())

    async def count_in_list(self, list_id: str) -> int:
        result = await self.db.execute(
            select(func.count(ListBook.id)).where(ListBook.list_id == list_id)
        )
        return result.scalar() or 0
