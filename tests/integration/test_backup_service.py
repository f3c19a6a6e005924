"""Backup export/import tests."""

import json
from datetime import date

import pytest

from bookshelf.core.exceptions import (
    InvalidDocumentShapeError,
    MalformedDocumentError,
    UnsupportedVersionError,
    ValidationError,
)
from bookshelf.models.reading_list import SystemListId
from bookshelf.schemas.library import BookInput
from bookshelf.services.backup_service import BackupService
from bookshelf.services.library_service import LibraryService


def make_document(lists=None, books=None, list_books=None, version=1) -> dict:
    return {
        "version": version,
        "exportedAt": 1700000000000,
        "lists": lists or [],
        "books": books or [],
        "listBooks": list_books or [],
    }


def book_record(book_id: str, work_key: str, **overrides) -> dict:
    record = {
        "id": book_id,
        "workKey": work_key,
        "title": f"Title {work_key}",
        "authorNames": '["Someone"]',
        "coverUrl": None,
        "firstPublishYear": None,
        "userRating": None,
        "notes": None,
        "readingProgress": 0,
        "createdAt": 1600000000000,
        "updatedAt": 1600000000000,
        "localSyncStatus": "synced",
        "serverId": "srv-1",
    }
    record.update(overrides)
    return record


class TestExport:
    """Test snapshot export."""

    async def test_empty_library(self, backup: BackupService):
        export = await backup.export_library()

        assert export.version == 1
        assert export.exported_at > 0
        assert [item.id for item in export.lists] == [
            SystemListId.READING,
            SystemListId.WILL_READ,
            SystemListId.READ,
        ]
        assert export.books == []
        assert export.list_books == []

    async def test_document_shape(self, backup: BackupService, library: LibraryService, fox: BookInput):
        await library.add_book_to_list(fox, SystemListId.READING)

        data = json.loads(await backup.export_library_json())

        assert set(data) == {"version", "exportedAt", "lists", "books", "listBooks"}
        book = data["books"][0]
        assert book["workKey"] == fox.work_key
        assert json.loads(book["authorNames"]) == ["Roald Dahl"]
        assert data["listBooks"][0]["listId"] == SystemListId.READING
        assert data["listBooks"][0]["bookId"] == book["id"]

    def test_export_filename(self, backup: BackupService):
        assert backup.get_export_filename(date(2024, 3, 9)) == "openbook_library_2024-03-09.json"


class TestRoundTrip:
    """Export a library and import it back."""

    async def test_replace_into_fresh_store(
        self,
        library: LibraryService,
        backup: BackupService,
        fox: BookInput,
        dune: BookInput,
        store_factory,
    ):
        custom = await library.create_list("Favorites")
        added = await library.add_book_to_list(fox, SystemListId.READING)
        await library.add_book_to_list(dune, custom.id)
        await library.set_book_rating(added.book.id, 4)
        await library.set_book_pages(added.book.id, 200, 50)
        document = await backup.export_library_json()

        target_store = await store_factory()
        target_library = LibraryService(target_store)
        result = await BackupService(target_store).import_library(document, mode="replace")

        # System lists already exist in the target and are skipped
        assert result.lists_imported == 1
        assert result.books_imported == 2
        assert result.list_books_imported == 2

        names = [item.name for item in await target_library.get_all_lists()]
        assert names == ["Reading", "Will Read", "Read", "Favorites"]

        restored = await target_library.get_book_by_work_key(fox.work_key)
        assert restored.user_rating == 4
        assert restored.total_pages == 200
        assert restored.current_page == 50
        assert restored.reading_progress == 25
        assert await target_library.get_list_ids_for_book(dune.work_key) == [custom.id]

    async def test_merge_into_same_store_keeps_counts(
        self,
        library: LibraryService,
        backup: BackupService,
        fox: BookInput,
        dune: BookInput,
    ):
        custom = await library.create_list("Favorites")
        await library.add_book_to_list(fox, SystemListId.READING)
        await library.add_book_to_list(fox, custom.id)
        await library.add_book_to_list(dune, SystemListId.WILL_READ)
        before = {item.id: item.book_count for item in await library.get_lists_with_counts()}

        result = await backup.import_library(await backup.export_library_json(), mode="merge")

        after = {item.id: item.book_count for item in await library.get_lists_with_counts()}
        assert after == before
        assert sum(after.values()) == 3
        assert await library.get_total_books_count() == 2
        assert result.books_imported == 2
        assert result.list_books_imported == 0
        assert sorted(await library.get_list_ids_for_book(fox.work_key)) == sorted(
            [SystemListId.READING, custom.id]
        )


class TestImportModes:
    """Test merge and replace semantics."""

    async def test_replace_wipes_books_and_custom_lists(
        self,
        library: LibraryService,
        backup: BackupService,
        fox: BookInput,
    ):
        custom = await library.create_list("Old list")
        await library.add_book_to_list(fox, custom.id)

        document = make_document(
            books=[book_record("x1", "OL1W")],
            list_books=[{"listId": SystemListId.READ, "bookId": "x1", "sortOrder": 0}],
        )
        result = await backup.import_library(document, mode="replace")

        assert result.books_imported == 1
        assert await library.get_book_by_work_key(fox.work_key) is None
        assert [item.id for item in await library.get_all_lists()] == [
            SystemListId.READING,
            SystemListId.WILL_READ,
            SystemListId.READ,
        ]
        assert await library.get_list_ids_for_book("OL1W") == [SystemListId.READ]

    async def test_merge_fills_gaps_only(self, library: LibraryService, backup: BackupService, fox: BookInput):
        existing = await library.save_book(fox)
        await library.set_book_rating(existing.id, 3)
        await library.set_book_progress(existing.id, 60)

        document = make_document(
            books=[
                book_record(
                    "other-device-id",
                    fox.work_key,
                    title="Changed title",
                    userRating=5,
                    notes="From backup",
                    readingProgress=40,
                )
            ]
        )
        result = await backup.import_library(document, mode="merge")

        merged = await library.get_book(existing.id)
        assert result.books_imported == 1
        assert merged.title == "Fantastic Mr. Fox"
        assert merged.user_rating == 3
        assert merged.notes == "From backup"
        assert merged.reading_progress == 60

    async def test_merge_takes_higher_progress(self, library: LibraryService, backup: BackupService, fox: BookInput):
        existing = await library.save_book(fox)
        await library.set_book_progress(existing.id, 10)

        await backup.import_library(
            make_document(books=[book_record("b", fox.work_key, readingProgress=80, userRating=2)]),
            mode="merge",
        )

        merged = await library.get_book(existing.id)
        assert merged.reading_progress == 80
        assert merged.user_rating == 2

    async def test_memberships_follow_remapped_ids(self, library: LibraryService, backup: BackupService, fox: BookInput):
        existing = await library.save_book(fox)

        document = make_document(
            books=[book_record("foreign-id", fox.work_key)],
            list_books=[
                {"listId": SystemListId.WILL_READ, "bookId": "foreign-id", "sortOrder": 0},
                {"listId": SystemListId.READ, "bookId": "unknown-book", "sortOrder": 1},
                {"listId": "missing-list", "bookId": "foreign-id", "sortOrder": 2},
            ],
        )
        result = await backup.import_library(document)

        assert result.list_books_imported == 1
        assert await library.get_list_ids_for_book(fox.work_key) == [SystemListId.WILL_READ]
        lists = await library.get_lists_for_book(existing.id)
        assert [item.id for item in lists] == [SystemListId.WILL_READ]

    async def test_duplicate_membership_not_created(self, library: LibraryService, backup: BackupService, fox: BookInput):
        await library.add_book_to_list(fox, SystemListId.READING)

        document = make_document(
            books=[book_record("b1", fox.work_key)],
            list_books=[{"listId": SystemListId.READING, "bookId": "b1", "sortOrder": 5}],
        )
        result = await backup.import_library(document)

        assert result.list_books_imported == 0
        assert await library.get_book_count_in_list(SystemListId.READING) == 1

    async def test_system_lists_never_overwritten(self, library: LibraryService, backup: BackupService):
        document = make_document(
            lists=[
                {
                    "id": SystemListId.READING,
                    "name": "Hijacked",
                    "listType": "system",
                    "icon": "x",
                    "color": "#000000",
                    "sortOrder": 9,
                }
            ]
        )
        await backup.import_library(document, mode="merge")

        reading = await library.get_list(SystemListId.READING)
        assert reading.name == "Reading"
        assert reading.sort_order == 0

    async def test_imported_rows_are_pending(self, library: LibraryService, backup: BackupService):
        await backup.import_library(make_document(books=[book_record("b1", "OL9W")]))

        book = await library.get_book_by_work_key("OL9W")
        assert book.local_sync_status == "pending"
        assert book.server_id is None
        assert book.created_at == 1600000000000

    async def test_out_of_range_values_clamped(self, library: LibraryService, backup: BackupService):
        await backup.import_library(
            make_document(books=[book_record("b1", "OL8W", userRating=9, readingProgress=250)])
        )

        book = await library.get_book_by_work_key("OL8W")
        assert book.user_rating == 5
        assert book.reading_progress == 100

    async def test_unknown_mode_rejected(self, backup: BackupService):
        with pytest.raises(ValidationError):
            await backup.import_library(make_document(), mode="append")


class TestDocumentErrors:
    """Test rejection of bad documents, before anything is written."""

    async def test_not_json(self, backup: BackupService):
        with pytest.raises(MalformedDocumentError):
            await backup.import_library("{not json")

    async def test_newer_version(self, backup: BackupService):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            await backup.import_library(json.dumps(make_document(version=2)))

        assert exc_info.value.details == {"version": 2, "supported": 1}

    async def test_missing_version(self, backup: BackupService):
        document = make_document()
        del document["version"]

        with pytest.raises(UnsupportedVersionError):
            await backup.import_library(document)

    async def test_missing_section(self, backup: BackupService):
        document = make_document()
        del document["listBooks"]

        with pytest.raises(InvalidDocumentShapeError):
            await backup.import_library(document)

    async def test_section_not_array(self, backup: BackupService):
        document = make_document()
        document["books"] = {"id": "b1"}

        with pytest.raises(InvalidDocumentShapeError):
            await backup.import_library(document)

    async def test_malformed_record(self, backup: BackupService):
        with pytest.raises(InvalidDocumentShapeError):
            await backup.import_library(make_document(books=[{"id": "b1"}]))

    async def test_rejected_replace_keeps_data(self, library: LibraryService, backup: BackupService, fox: BookInput):
        await library.save_book(fox)

        with pytest.raises(UnsupportedVersionError):
            await backup.import_library(make_document(version=99), mode="replace")

        assert await library.get_total_books_count() == 1


class TestStats:
    async def test_library_stats(self, library: LibraryService, backup: BackupService, fox: BookInput, dune: BookInput):
        await library.create_list("Favorites")
        first = await library.save_book(fox)
        second = await library.save_book(dune)
        await library.set_book_rating(first.id, 4)
        await library.set_book_notes(second.id, "Spice")

        stats = await backup.get_library_stats()

        assert stats.total_lists == 4
        assert stats.custom_lists == 1
        assert stats.total_books == 2
        assert stats.books_with_rating == 1
        assert stats.books_with_notes == 1
