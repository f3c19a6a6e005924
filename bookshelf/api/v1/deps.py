"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from bookshelf.db.store import LibraryStore
from bookshelf.services.backup_service import BackupService
from bookshelf.services.library_service import LibraryService
from bookshelf.services.stats_service import StatsService


def get_store(request: Request) -> LibraryStore:
    """The store opened by the application lifespan (or injected in create_app)."""
    return request.app.state.store


def get_library_service(store: LibraryStore = Depends(get_store)) -> LibraryService:
    return LibraryService(store)


def get_backup_service(store: LibraryStore = Depends(get_store)) -> BackupService:
    return BackupService(store)


def get_stats_service(store: LibraryStore = Depends(get_store)) -> StatsService:
    return StatsService(store)


# Type aliases for cleaner endpoint signatures
Store = Annotated[LibraryStore, Depends(get_store)]
Library = Annotated[LibraryService, Depends(get_library_service)]
Backup = Annotated[BackupService, Depends(get_backup_service)]
Stats = Annotated[StatsService, Depends(get_stats_service)]
