"""Library store: scoped sessions over the embedded database."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from typing import TypeVar

import structlog
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from bookshelf.core.exceptions import StorageError
from bookshelf.db.changes import ChangeFeed
from bookshelf.db.session import create_engine, create_session_factory
from bookshelf.models.base import Base

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LibraryStore:
    """Entry point to the database for services.

    ``write()`` is the only way to mutate rows: everything done in one scope
    commits together or is rolled back, and subscribers hear about the
    touched tables only after the commit.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)
        self.changes = ChangeFeed()
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_url(cls, database_url: str | None = None, echo: bool | None = None) -> "LibraryStore":
        return cls(create_engine(database_url, echo=echo))

    async def create_all(self) -> None:
        """Create missing tables (tests and first run without migrations)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        logger.info("Closing library store")
        await self.engine.dispose()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[AsyncSession]:
        """Session for queries; never committed."""
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                logger.error("Read failed", error=str(exc))
                raise StorageError("Storage read failed", details=str(exc)) from exc

    @asynccontextmanager
    async def write(self) -> AsyncIterator[AsyncSession]:
        """Write transaction scope. Writes are serialized."""
        touched: set[str] = set()

        def collect_tables(session, flush_context, instances) -> None:
            for obj in (*session.new, *session.dirty, *session.deleted):
                touched.add(obj.__table__.name)

        async with self._write_lock:
            async with self.session_factory() as session:
                event.listen(session.sync_session, "before_flush", collect_tables)
                try:
                    yield session
                    await session.commit()
                except SQLAlchemyError as exc:
                    await session.rollback()
                    logger.error("Write transaction rolled back", error=str(exc))
                    raise StorageError("Storage write failed", details=str(exc)) from exc
                except Exception:
                    await session.rollback()
                    raise

        if touched:
            self.changes.publish(touched)

    async def observe(
        self,
        fetch: Callable[[AsyncSession], Awaitable[T]],
        tables: Iterable[str],
    ) -> AsyncIterator[T]:
        """Live query.

        Yields ``fetch``'s result right away and again after every commit
        touching one of ``tables``. Bursts of commits between two reads are
        coalesced into a single emission.
        """
        changed = asyncio.Event()
        unsubscribe = self.changes.subscribe(tables, lambda _tables: changed.set())
        try:
            while True:
                changed.clear()
                async with self.read() as session:
                    result = await fetch(session)
                yield result
                await changed.wait()
        finally:
            unsubscribe()
