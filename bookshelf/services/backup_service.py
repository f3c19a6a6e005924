"""Backup service: JSON export and merge/replace import of the library."""

import json
from datetime import UTC, date, datetime
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.config import settings
from bookshelf.core.exceptions import (
    InvalidDocumentShapeError,
    MalformedDocumentError,
    UnsupportedVersionError,
    ValidationError,
)
from bookshelf.db.store import LibraryStore
from bookshelf.models.base import now_ms
from bookshelf.models.list_book import ListBook
from bookshelf.models.reading_list import ReadingList
from bookshelf.models.saved_book import SavedBook, clamp, sanitize_author_names
from bookshelf.repositories.book_repo import BookRepository
from bookshelf.repositories.list_book_repo import ListBookRepository
from bookshelf.repositories.list_repo import ListRepository
from bookshelf.schemas.backup import (
    BookRecord,
    ImportMode,
    ImportResult,
    LibraryExport,
    LibraryStats,
    ListBookRecord,
    ListRecord,
)
from bookshelf.services.stats_service import StatsService

logger = structlog.get_logger(__name__)

DOCUMENT_SECTIONS = ("lists", "books", "listBooks")


# ==================== ROW <-> RECORD MAPPING ====================


def list_to_record(reading_list: ReadingList) -> ListRecord:
    return ListRecord(
        id=reading_list.id,
        name=reading_list.name,
        list_type=reading_list.list_type,
        icon=reading_list.icon,
        color=reading_list.color,
        sort_order=reading_list.sort_order,
        created_at=reading_list.created_at,
        updated_at=reading_list.updated_at,
        local_sync_status=reading_list.local_sync_status,
        server_id=reading_list.server_id,
    )


def book_to_record(book: SavedBook) -> BookRecord:
    return BookRecord(
        id=book.id,
        work_key=book.work_key,
        title=book.title,
        author_names=json.dumps(book.author_names or []),
        cover_url=book.cover_url,
        first_publish_year=book.first_publish_year,
        user_rating=book.user_rating,
        notes=book.notes,
        reading_progress=book.reading_progress,
        total_pages=book.total_pages,
        current_page=book.current_page,
        reading_started_at=book.reading_started_at,
        reading_finished_at=book.reading_finished_at,
        created_at=book.created_at,
        updated_at=book.updated_at,
        local_sync_status=book.local_sync_status,
        server_id=book.server_id,
    )


def list_book_to_record(list_book: ListBook) -> ListBookRecord:
    return ListBookRecord(
        id=list_book.id,
        list_id=list_book.list_id,
        book_id=list_book.book_id,
        added_at=list_book.added_at,
        sort_order=list_book.sort_order,
        updated_at=list_book.updated_at,
        local_sync_status=list_book.local_sync_status,
        server_id=list_book.server_id,
    )


def page_fields(record: BookRecord) -> dict[str, int | None]:
    """Page tracking values from a record, made consistent."""
    if record.total_pages is None:
        return {"total_pages": None, "current_page": None}
    total = max(1, record.total_pages)
    current = None if record.current_page is None else clamp(record.current_page, 0, total)
    return {"total_pages": total, "current_page": current}


def merge_book(book: SavedBook, record: BookRecord) -> None:
    """Fold an incoming record into an existing book.

    Only gaps are filled; progress only moves forward.
    """
    if record.user_rating is not None and book.user_rating is None:
        book.user_rating = clamp(record.user_rating, 0, 5)
    if record.notes and not book.notes:
        book.notes = record.notes
    if record.reading_progress > book.reading_progress:
        book.reading_progress = clamp(record.reading_progress, 0, 100)
    if book.total_pages is None and record.total_pages is not None:
        pages = page_fields(record)
        book.total_pages = pages["total_pages"]
        book.current_page = pages["current_page"]
    if book.reading_started_at is None and record.reading_started_at is not None:
        book.reading_started_at = record.reading_started_at
    if book.reading_finished_at is None and record.reading_finished_at is not None:
        book.reading_finished_at = record.reading_finished_at
    book.mark_pending()


class BackupService:
    """Service for exporting and importing the whole library."""

    def __init__(self, store: LibraryStore, supported_version: int | None = None):
        self.store = store
        self.supported_version = supported_version or settings.backup_version

    # ==================== EXPORT ====================

    async def export_library(self) -> LibraryExport:
        """Snapshot every list, book and membership row."""
        async with self.store.read() as session:
            lists = await ListRepository(session).list_all()
            books = await BookRepository(session).list_all(newest_first=False)
            list_books = await ListBookRepository(session).list_all()

            export = LibraryExport(
                version=self.supported_version,
                exported_at=now_ms(),
                lists=[list_to_record(item) for item in lists],
                books=[book_to_record(item) for item in books],
                list_books=[list_book_to_record(item) for item in list_books],
            )

        logger.info(
            "Library exported",
            lists=len(export.lists),
            books=len(export.books),
            list_books=len(export.list_books),
        )
        return export

    async def export_library_json(self) -> str:
        return (await self.export_library()).to_json()

    def get_export_filename(self, today: date | None = None) -> str:
        """File name for an export, stamped with today's UTC date."""
        day = today or datetime.now(UTC).date()
        return f"{settings.export_filename_prefix}_{day.isoformat()}.json"

    async def get_library_stats(self) -> LibraryStats:
        return await StatsService(self.store).get_library_stats()

    # ==================== IMPORT ====================

    def parse_document(self, document: str | bytes | dict[str, Any]) -> LibraryExport:
        """Decode and validate a backup document.

        Raises:
            MalformedDocumentError: not JSON
            UnsupportedVersionError: version missing or newer than supported
            InvalidDocumentShapeError: sections missing or records invalid
        """
        if isinstance(document, (str, bytes, bytearray)):
            try:
                data = json.loads(document)
            except ValueError as exc:
                raise MalformedDocumentError("Invalid JSON format", details=str(exc)) from exc
        else:
            data = document

        if not isinstance(data, dict):
            raise InvalidDocumentShapeError("Invalid backup format: expected a JSON object")

        version = data.get("version")
        if (
            not isinstance(version, int)
            or isinstance(version, bool)
            or version < 1
            or version > self.supported_version
        ):
            raise UnsupportedVersionError(version, self.supported_version)

        for section in DOCUMENT_SECTIONS:
            if not isinstance(data.get(section), list):
                raise InvalidDocumentShapeError(
                    f"Invalid backup format: '{section}' must be an array",
                    details={"section": section},
                )

        try:
            return LibraryExport.model_validate(
                {
                    "version": version,
                    "exportedAt": data.get("exportedAt") or 0,
                    "lists": data["lists"],
                    "books": data["books"],
                    "listBooks": data["listBooks"],
                }
            )
        except PydanticValidationError as exc:
            errors = [
                {"loc": list(error["loc"]), "msg": error["msg"]}
                for error in exc.errors()
            ]
            raise InvalidDocumentShapeError(
                "Invalid backup format: malformed records",
                details=errors,
            ) from exc

    async def import_library(
        self,
        document: str | bytes | dict[str, Any],
        mode: ImportMode = "merge",
    ) -> ImportResult:
        """Import a backup document.

        ``merge`` keeps existing rows and fills their gaps, ``replace`` wipes
        books, memberships and custom lists first. The whole document is
        applied in one transaction.
        """
        if mode not in ("merge", "replace"):
            raise ValidationError(f"Unknown import mode '{mode}'", details={"mode": mode})

        try:
            export = self.parse_document(document)
        except ValidationError as exc:
            logger.warning("Backup document rejected", code=exc.code, reason=exc.message)
            raise

        result = ImportResult()
        async with self.store.write() as session:
            if mode == "replace":
                await self._wipe(session)

            result.lists_imported = await self._import_lists(session, export.lists)

            # Book ids are local to the exporting device
            book_id_map: dict[str, str] = {}
            result.books_imported = await self._import_books(session, export.books, mode, book_id_map)
            result.list_books_imported = await self._import_list_books(
                session, export.list_books, book_id_map
            )

        logger.info(
            "Library imported",
            mode=mode,
            lists=result.lists_imported,
            books=result.books_imported,
            list_books=result.list_books_imported,
        )
        return result

    async def _wipe(self, session: AsyncSession) -> None:
        list_books = ListBookRepository(session)
        removed_memberships = await list_books.delete_rows(await list_books.list_all())

        books = BookRepository(session)
        all_books = await books.list_all()
        for book in all_books:
            await books.delete(book)

        lists = ListRepository(session)
        custom_lists = await lists.list_by_type("custom")
        for reading_list in custom_lists:
            await lists.delete(reading_list)

        logger.info(
            "Library wiped for replace import",
            list_books=removed_memberships,
            books=len(all_books),
            lists=len(custom_lists),
        )

    async def _import_lists(self, session: AsyncSession, records: list[ListRecord]) -> int:
        lists = ListRepository(session)
        imported = 0

        for record in records:
            existing = await lists.get_by_id(record.id)
            if existing:
                # System lists are matched by id and never overwritten
                if existing.is_system_list:
                    continue
                existing.name = record.name
                existing.icon = record.icon
                existing.color = record.color
                existing.sort_order = record.sort_order
                existing.mark_pending()
            else:
                reading_list = ReadingList(
                    id=record.id,
                    name=record.name,
                    list_type=record.list_type,
                    icon=record.icon,
                    color=record.color,
                    sort_order=record.sort_order,
                    local_sync_status="pending",
                    server_id=None,
                )
                if record.created_at is not None:
                    reading_list.created_at = record.created_at
                session.add(reading_list)

            await session.flush()
            imported += 1

        return imported

    async def _import_books(
        self,
        session: AsyncSession,
        records: list[BookRecord],
        mode: ImportMode,
        book_id_map: dict[str, str],
    ) -> int:
        books = BookRepository(session)
        imported = 0

        for record in records:
            existing = await books.get_by_work_key(record.work_key)
            if existing:
                book_id_map[record.id] = existing.id
                if mode == "merge":
                    merge_book(existing, record)
                    await session.flush()
            else:
                book = await books.create(
                    work_key=record.work_key,
                    title=record.title,
                    author_names=sanitize_author_names(record.author_names),
                    cover_url=record.cover_url,
                    first_publish_year=record.first_publish_year,
                    user_rating=None if record.user_rating is None else clamp(record.user_rating, 0, 5),
                    notes=record.notes,
                    reading_progress=clamp(record.reading_progress, 0, 100),
                    reading_started_at=record.reading_started_at,
                    reading_finished_at=record.reading_finished_at,
                    **page_fields(record),
                )
                if record.created_at is not None:
                    book.created_at = record.created_at
                    await session.flush()
                book_id_map[record.id] = book.id
            imported += 1

        return imported

    async def _import_list_books(
        self,
        session: AsyncSession,
        records: list[ListBookRecord],
        book_id_map: dict[str, str],
    ) -> int:
        lists = ListRepository(session)
        list_books = ListBookRepository(session)
        imported = 0
        skipped = 0

        for record in records:
            book_id = book_id_map.get(record.book_id)
            if not book_id:
                skipped += 1
                continue

            if not await lists.get_by_id(record.list_id):
                logger.warning("Skipping membership for unknown list", list_id=record.list_id)
                skipped += 1
                continue

            if await list_books.exists(record.list_id, book_id):
                continue

            await list_books.create(
                list_id=record.list_id,
                book_id=book_id,
                sort_order=record.sort_order,
                added_at=record.added_at,
            )
            imported += 1

        if skipped:
            logger.info("Unresolved memberships skipped", skipped=skipped)
        return imported
