"""Reading list repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.models.list_book import ListBook
from bookshelf.models.reading_list import ReadingList


class ListRepository:
    """Repository for reading list operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, list_id: str) -> ReadingList | None:
        return await self.db.get(ReadingList, list_id)

    async def list_all(self) -> list[ReadingList]:
        """All lists by sort order."""
        result = await self.db.execute(
            select(ReadingList).order_by(ReadingList.sort_order.asc(), ReadingList.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_by_type(self, list_type: str) -> list[ReadingList]:
        result = await self.db.execute(
            select(ReadingList).where(ReadingList.list_type == list_type)
        )
        return list(result.scalars().all())

    async def list_with_counts(self) -> list[tuple[ReadingList, int]]:
        """Every list paired with the number of books in it."""
        stmt = (
            select(ReadingList, func.count(ListBook.id))
            .outerjoin(ListBook, ListBook.list_id == ReadingList.id)
            .group_by(ReadingList.id)
            .order_by(ReadingList.sort_order.asc())
        )
        result = await self.db.execute(stmt)
        return [(reading_list, count) for reading_list, count in result.all()]

    async def next_sort_order(self) -> int:
        result = await self.db.execute(select(func.max(ReadingList.sort_order)))
        current = result.scalar()
        return 0 if current is None else current + 1

    async def create(
        self,
        name: str,
        list_type: str = "custom",
        icon: str = "folder",
        color: str = "#607D8B",
        sort_order: int | None = None,
        list_id: str | None = None,
    ) -> ReadingList:
        """Create a list; appends after the last list unless told otherwise."""
        if sort_order is None:
            sort_order = await self.next_sort_order()

        reading_list = ReadingList(
            name=name,
            list_type=list_type,
            icon=icon,
            color=color,
            sort_order=sort_order,
            local_sync_status="pending",
            server_id=None,
        )
        if list_id is not None:
            reading_list.id = list_id

        self.db.add(reading_list)
        await self.db.flush()
        return reading_list

    async def delete(self, reading_list: ReadingList) -> None:
        await self.db.delete(reading_list)
        await self.db.flush()

    async def count(self, list_type: str | None = None) -> int:
        stmt = select(func.count(ReadingList.id))
        if list_type is not None:
            stmt = stmt.where(ReadingList.list_type == list_type)
        result = await self.db.execute(stmt)
        return result.scalar() or 0
