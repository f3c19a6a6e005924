"""Store transaction and live query tests."""

import asyncio

import pytest
from sqlalchemy import text

from bookshelf.core.exceptions import NotFoundError, StorageError
from bookshelf.db.store import LibraryStore
from bookshelf.models.reading_list import ReadingList, SystemListId
from bookshelf.schemas.library import BookInput
from bookshelf.services.library_service import LibraryService


class TestWriteScope:
    """Test commit, rollback and change notification."""

    async def test_commit_publishes_touched_tables(self, seeded_store: LibraryStore):
        received = []
        seeded_store.changes.subscribe(["reading_lists"], received.append)

        async with seeded_store.write() as session:
            session.add(ReadingList(name="Favorites", list_type="custom"))

        assert received == [frozenset({"reading_lists"})]

    async def test_error_rolls_back_everything(self, seeded_store: LibraryStore):
        received = []
        seeded_store.changes.subscribe(["reading_lists"], received.append)

        with pytest.raises(NotFoundError):
            async with seeded_store.write() as session:
                session.add(ReadingList(id="custom-1", name="Favorites", list_type="custom"))
                await session.flush()
                raise NotFoundError("Book", "missing")

        async with seeded_store.read() as session:
            assert await session.get(ReadingList, "custom-1") is None
        assert received == []

    async def test_database_error_becomes_storage_error(self, seeded_store: LibraryStore):
        with pytest.raises(StorageError):
            async with seeded_store.write() as session:
                # Duplicate primary key
                session.add(ReadingList(id=SystemListId.READING, name="Again", list_type="custom"))
                await session.flush()

    async def test_check_constraint_enforced(self, seeded_store: LibraryStore):
        with pytest.raises(StorageError):
            async with seeded_store.write() as session:
                await session.execute(
                    text("UPDATE reading_lists SET list_type = 'other' WHERE id = :id"),
                    {"id": SystemListId.READING},
                )

    async def test_concurrent_writes_are_serialized(self, library: LibraryService):
        lists = await asyncio.gather(*(library.create_list(f"List {i}") for i in range(5)))

        assert sorted(item.sort_order for item in lists) == [3, 4, 5, 6, 7]


class TestObserve:
    """Test live queries."""

    async def test_emits_initial_and_after_commit(self, library: LibraryService, fox: BookInput):
        stream = library.observe_books_in_list(SystemListId.READING)

        first = await anext(stream)
        assert first == []

        await library.add_book_to_list(fox, SystemListId.READING)
        second = await asyncio.wait_for(anext(stream), timeout=5)

        assert [book.work_key for book in second] == [fox.work_key]
        await stream.aclose()

    async def test_list_ids_follow_membership(self, library: LibraryService, fox: BookInput):
        stream = library.observe_list_ids_for_book(fox.work_key)
        assert await anext(stream) == []

        await library.add_book_to_list(fox, SystemListId.WILL_READ)

        assert await asyncio.wait_for(anext(stream), timeout=5) == [SystemListId.WILL_READ]
        await stream.aclose()

    async def test_unsubscribes_on_close(self, library: LibraryService, seeded_store: LibraryStore):
        stream = library.observe_lists()
        await anext(stream)
        assert seeded_store.changes.subscriber_count("reading_lists") == 1

        await stream.aclose()

        assert seeded_store.changes.subscriber_count("reading_lists") == 0
