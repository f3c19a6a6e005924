"""Seed the predefined system reading lists."""

from dataclasses import dataclass

import structlog
from sqlalchemy import select

from bookshelf.db.store import LibraryStore
from bookshelf.models.reading_list import ReadingList, SystemListId

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DefaultListConfig:
    id: str
    name: str
    icon: str
    color: str
    sort_order: int


DEFAULT_LISTS: tuple[DefaultListConfig, ...] = (
    DefaultListConfig(SystemListId.READING, "Reading", "📖", "#4CAF50", 0),
    DefaultListConfig(SystemListId.WILL_READ, "Will Read", "🔖", "#2196F3", 1),
    DefaultListConfig(SystemListId.READ, "Read", "✅", "#9C27B0", 2),
)


async def initialize_default_lists(store: LibraryStore) -> bool:
    """Create any missing system lists.

    Returns True when at least one list was created.
    """
    wanted = {config.id for config in DEFAULT_LISTS}

    async with store.write() as session:
        result = await session.execute(select(ReadingList.id).where(ReadingList.id.in_(wanted)))
        existing = set(result.scalars().all())
        missing = [config for config in DEFAULT_LISTS if config.id not in existing]

        for config in missing:
            session.add(
                ReadingList(
                    id=config.id,
                    name=config.name,
                    list_type="system",
                    icon=config.icon,
                    color=config.color,
                    sort_order=config.sort_order,
                    local_sync_status="pending",
                    server_id=None,
                )
            )

    if missing:
        logger.info("Default lists created", lists=[config.id for config in missing])
    else:
        logger.debug("Default lists already initialized")
    return bool(missing)


async def is_seed_initialized(store: LibraryStore) -> bool:
    """True when all system lists exist."""
    wanted = {config.id for config in DEFAULT_LISTS}
    async with store.read() as session:
        result = await session.execute(select(ReadingList.id).where(ReadingList.id.in_(wanted)))
        return set(result.scalars().all()) == wanted
