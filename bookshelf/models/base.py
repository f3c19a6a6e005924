"""Declarative base and shared column mixins."""

import time
import uuid

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

SYNC_STATUSES = ("pending", "synced", "conflict")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for all models."""


class StringIdMixin:
    """Text primary key, random unless the caller provides one."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)


class TimestampMixin:
    """created_at is fixed at insert, updated_at moves with every UPDATE."""

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)
    updated_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_ms,
        onupdate=now_ms,
    )


class SyncMixin:
    """Local reconciliation marker; the sync transport itself lives elsewhere."""

    local_sync_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )
    server_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def mark_pending(self) -> None:
        self.local_sync_status = "pending"

    def mark_synced(self, server_id: str) -> None:
        self.local_sync_status = "synced"
        self.server_id = server_id
