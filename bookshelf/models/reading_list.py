"""Reading list database model."""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.models.base import Base, StringIdMixin, SyncMixin, TimestampMixin

LIST_TYPES = ("system", "custom")


class SystemListId:
    """Fixed ids of the lists seeded on first run."""

    READING = "system:reading"
    WILL_READ = "system:will_read"
    READ = "system:read"


class ReadingList(Base, StringIdMixin, TimestampMixin, SyncMixin):
    """A named, ordered collection of saved books."""

    __tablename__ = "reading_lists"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # system lists are seeded once and never destroyed
    list_type: Mapped[str] = mapped_column(String(20), nullable=False, default="custom")
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="folder")
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="#607D8B")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "list_type IN ('system', 'custom')",
            name="check_list_type",
        ),
        CheckConstraint(
            "local_sync_status IN ('pending', 'synced', 'conflict')",
            name="check_list_sync_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<ReadingList {self.name!r} ({self.id})>"

    @property
    def is_system_list(self) -> bool:
        return self.list_type == "system"
