"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bookshelf.db.seed import initialize_default_lists
from bookshelf.db.store import LibraryStore
from bookshelf.main import create_app
from bookshelf.schemas.library import BookInput
from bookshelf.services.backup_service import BackupService
from bookshelf.services.library_service import LibraryService


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite database, fresh for every test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture(scope="function")
async def store(database_url: str) -> AsyncGenerator[LibraryStore, None]:
    """Create an empty library store with all tables."""
    library_store = LibraryStore.from_url(database_url, echo=False)
    await library_store.create_all()

    yield library_store

    await library_store.dispose()


@pytest_asyncio.fixture
async def seeded_store(store: LibraryStore) -> LibraryStore:
    """Store with the three system lists."""
    await initialize_default_lists(store)
    return store


@pytest_asyncio.fixture
async def store_factory(tmp_path) -> AsyncGenerator[Callable[[], Awaitable[LibraryStore]], None]:
    """Open additional seeded stores, e.g. as an import target."""
    opened: list[LibraryStore] = []

    async def factory() -> LibraryStore:
        url = f"sqlite+aiosqlite:///{tmp_path / f'extra_{len(opened)}.db'}"
        extra = LibraryStore.from_url(url, echo=False)
        opened.append(extra)
        await extra.create_all()
        await initialize_default_lists(extra)
        return extra

    yield factory

    for extra in opened:
        await extra.dispose()


@pytest_asyncio.fixture
async def library(seeded_store: LibraryStore) -> LibraryService:
    return LibraryService(seeded_store, auto_finish_on_complete=False)


@pytest_asyncio.fixture
async def backup(seeded_store: LibraryStore) -> BackupService:
    return BackupService(seeded_store, supported_version=1)


@pytest_asyncio.fixture(scope="function")
async def client(seeded_store: LibraryStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client bound to the test store."""
    app = create_app(store=seeded_store)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def fox() -> BookInput:
    return BookInput(
        work_key="OL45883W",
        title="Fantastic Mr. Fox",
        author_names=["Roald Dahl"],
        cover_url="https://covers.openlibrary.org/b/id/6498519-M.jpg",
        first_publish_year=1970,
    )


@pytest.fixture
def dune() -> BookInput:
    return BookInput(
        work_key="OL893415W",
        title="Dune",
        author_names=["Frank Herbert"],
        first_publish_year=1965,
    )
