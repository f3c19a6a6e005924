"""Saved book repository."""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.models.saved_book import SavedBook


class BookRepository:
    """Repository for saved book operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, book_id: str) -> SavedBook | None:
        return await self.db.get(SavedBook, book_id)

    async def get_by_work_key(self, work_key: str) -> SavedBook | None:
        """First book cached for a catalog work."""
        stmt = (
            select(SavedBook)
            .where(SavedBook.work_key == work_key)
            .order_by(SavedBook.created_at.asc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, newest_first: bool = True) -> list[SavedBook]:
        order = SavedBook.created_at.desc() if newest_first else SavedBook.created_at.asc()
        result = await self.db.execute(select(SavedBook).order_by(order))
        return list(result.scalars().all())

    async def create(
        self,
        work_key: str,
        title: str,
        author_names: list[str] | None = None,
        cover_url: str | None = None,
        first_publish_year: int | None = None,
        **user_state,
    ) -> SavedBook:
        """Create a book. ``user_state`` may carry rating, notes, progress and page fields."""
        book = SavedBook(
            work_key=work_key,
            title=title,
            author_names=list(author_names or []),
            cover_url=cover_url or None,
            first_publish_year=first_publish_year,
            user_rating=user_state.pop("user_rating", None),
            notes=user_state.pop("notes", None),
            reading_progress=user_state.pop("reading_progress", 0),
            local_sync_status="pending",
            server_id=None,
            **user_state,
        )
        self.db.add(book)
        await self.db.flush()
        return book

    async def delete(self, book: SavedBook) -> None:
        await self.db.delete(book)
        await self.db.flush()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(SavedBook.id)))
        return result.scalar() or 0

    async def count_rated(self) -> int:
        result = await self.db.execute(
            select(func.count(SavedBook.id)).where(SavedBook.user_rating.isnot(None))
        )
        return result.scalar() or 0

    async def count_with_notes(self) -> int:
        result = await self.db.execute(
            select(func.count(SavedBook.id)).where(
                and_(SavedBook.notes.isnot(None), SavedBook.notes != "")
            )
        )
        return result.scalar() or 0
