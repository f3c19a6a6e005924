"""Backup document schemas.

The document uses camelCase keys; each record model is the explicit mapping
between a backup record and its table row.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bookshelf.schemas.library import ListType, SyncStatus

ImportMode = Literal["merge", "replace"]


class BackupModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListRecord(BackupModel):
    """reading_lists row."""

    id: str
    name: str
    list_type: ListType = "custom"
    icon: str = "folder"
    color: str = "#607D8B"
    sort_order: int = 0
    created_at: int | None = None
    updated_at: int | None = None
    local_sync_status: SyncStatus = "pending"
    server_id: str | None = None


class BookRecord(BackupModel):
    """saved_books row. ``author_names`` travels as a JSON-encoded string."""

    id: str
    work_key: str
    title: str
    author_names: str = "[]"
    cover_url: str | None = None
    first_publish_year: int | None = None
    user_rating: int | None = None
    notes: str | None = None
    reading_progress: int = 0
    total_pages: int | None = None
    current_page: int | None = None
    reading_started_at: int | None = None
    reading_finished_at: int | None = None
    created_at: int | None = None
    updated_at: int | None = None
    local_sync_status: SyncStatus = "pending"
    server_id: str | None = None

    @field_validator("author_names", mode="before")
    @classmethod
    def encode_author_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return json.dumps(value)
        if value is None:
            return "[]"
        return value


class ListBookRecord(BackupModel):
    """list_books row."""

    id: str | None = None
    list_id: str
    book_id: str
    added_at: int | None = None
    sort_order: int = 0
    updated_at: int | None = None
    local_sync_status: SyncStatus = "pending"
    server_id: str | None = None


class LibraryExport(BackupModel):
    """Complete library snapshot."""

    version: int
    exported_at: int
    lists: list[ListRecord] = Field(default_factory=list)
    books: list[BookRecord] = Field(default_factory=list)
    list_books: list[ListBookRecord] = Field(default_factory=list)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class ImportResult(BackupModel):
    """Counts of processed records."""

    lists_imported: int = 0
    books_imported: int = 0
    list_books_imported: int = 0


class LibraryStats(BackupModel):
    """Aggregate library counts."""

    total_lists: int
    custom_lists: int
    total_books: int
    books_with_rating: int
    books_with_notes: int
