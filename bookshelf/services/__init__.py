"""Services package for business logic."""

from bookshelf.services.backup_service import BackupService
from bookshelf.services.library_service import LibraryService
from bookshelf.services.stats_service import StatsService

__all__ = ["LibraryService", "BackupService", "StatsService"]
