"""Saved book database model."""

import json
import math
from typing import Any

from sqlalchemy import JSON, BigInteger, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.models.base import Base, StringIdMixin, SyncMixin, TimestampMixin


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def progress_from_pages(current_page: int, total_pages: int) -> int:
    """Percentage read, rounded half up and clamped to 0-100."""
    if total_pages <= 0:
        return 0
    return clamp(math.floor(current_page * 100 / total_pages + 0.5), 0, 100)


def sanitize_author_names(raw: Any) -> list[str]:
    """Coerce stored or imported author names into a list of strings.

    Accepts a list, a JSON-encoded list, or a bare name.
    """
    if isinstance(raw, list):
        return [str(name) for name in raw]
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return [raw] if raw else []
        if isinstance(parsed, list):
            return [str(name) for name in parsed]
        return [raw] if raw else []
    return []


class SavedBook(Base, StringIdMixin, TimestampMixin, SyncMixin):
    """Local projection of a catalog work plus the user's reading state."""

    __tablename__ = "saved_books"

    # Catalog identity; unique for lookups, not enforced by the schema
    work_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Cached catalog metadata
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author_names: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cover_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    first_publish_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # User state
    user_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reading_progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Page tracking (schema version 2)
    total_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reading_started_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    reading_finished_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "user_rating IS NULL OR (user_rating >= 0 AND user_rating <= 5)",
            name="check_user_rating_range",
        ),
        CheckConstraint(
            "reading_progress >= 0 AND reading_progress <= 100",
            name="check_reading_progress_range",
        ),
        CheckConstraint(
            "local_sync_status IN ('pending', 'synced', 'conflict')",
            name="check_book_sync_status",
        ),
        Index("idx_saved_books_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<SavedBook {self.title[:30]!r} ({self.work_key})>"

    @property
    def has_page_tracking(self) -> bool:
        return self.total_pages is not None and self.total_pages > 0

    @property
    def calculated_progress(self) -> int:
        """Progress derived from pages when tracked, else the stored value."""
        if not self.has_page_tracking:
            return self.reading_progress
        if not self.current_page or self.current_page <= 0:
            return 0
        return progress_from_pages(self.current_page, self.total_pages)

    @property
    def author_names_formatted(self) -> str:
        return ", ".join(self.author_names or [])
