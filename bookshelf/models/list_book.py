"""List membership junction model."""

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.models.base import Base, StringIdMixin, SyncMixin, now_ms

if TYPE_CHECKING:
    from bookshelf.models.reading_list import ReadingList
    from bookshelf.models.saved_book import SavedBook


class ListBook(Base, StringIdMixin, SyncMixin):
    """One list-contains-book fact.

    At most one row exists per (list_id, book_id); the service checks before
    creating instead of relying on a unique constraint, matching the
    portable backup format.
    """

    __tablename__ = "list_books"

    list_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("reading_lists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("saved_books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    added_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_ms,
        onupdate=now_ms,
    )

    # Only used for flush ordering; queries join explicitly
    reading_list: Mapped["ReadingList"] = relationship("ReadingList", lazy="raise")
    book: Mapped["SavedBook"] = relationship("SavedBook", lazy="raise")

    __table_args__ = (
        Index("idx_list_books_list_sort", "list_id", "sort_order"),
    )

    def __repr__(self) -> str:
        return f"<ListBook list={self.list_id} book={self.book_id} #{self.sort_order}>"
