"""Reading list and saved book schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ListType = Literal["system", "custom"]
SyncStatus = Literal["pending", "synced", "conflict"]


class BookInput(BaseModel):
    """Book data from the catalog client, normalized for saving."""

    work_key: str = Field(..., min_length=1, description="Catalog work key, e.g. OL45883W")
    title: str = Field(..., min_length=1)
    author_names: list[str] | None = None
    cover_url: str | None = None
    first_publish_year: int | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "workKey": "OL45883W",
                "title": "Fantastic Mr. Fox",
                "authorNames": ["Roald Dahl"],
                "coverUrl": "https://covers.openlibrary.org/b/id/6498519-M.jpg",
                "firstPublishYear": 1970,
            }
        },
    )


class ListCreate(BaseModel):
    """Request to create a custom list."""

    name: str = Field(..., min_length=2, max_length=50)
    icon: str = Field(default="folder", max_length=50)
    color: str = Field(default="#607D8B", max_length=20)


class ListUpdate(BaseModel):
    """Partial list update."""

    name: str | None = Field(default=None, min_length=2, max_length=50)
    icon: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, max_length=20)


class RatingUpdate(BaseModel):
    rating: int


class ProgressUpdate(BaseModel):
    progress: int


class NotesUpdate(BaseModel):
    notes: str


class PagesUpdate(BaseModel):
    """Enable page tracking for a book."""

    total_pages: int
    current_page: int = 0


class CurrentPageUpdate(BaseModel):
    current_page: int


class ReadingListResponse(BaseModel):
    """Reading list response."""

    id: str
    name: str
    list_type: ListType
    icon: str
    color: str
    sort_order: int
    created_at: int
    updated_at: int
    local_sync_status: SyncStatus
    server_id: str | None = None
    is_system_list: bool

    model_config = ConfigDict(from_attributes=True)


class ListWithCount(ReadingListResponse):
    """Reading list plus the number of books it holds."""

    book_count: int = 0


class SavedBookResponse(BaseModel):
    """Saved book response, including derived progress fields."""

    id: str
    work_key: str
    title: str
    author_names: list[str]
    author_names_formatted: str
    cover_url: str | None = None
    first_publish_year: int | None = None
    user_rating: int | None = None
    notes: str | None = None
    reading_progress: int
    calculated_progress: int
    has_page_tracking: bool
    total_pages: int | None = None
    current_page: int | None = None
    reading_started_at: int | None = None
    reading_finished_at: int | None = None
    created_at: int
    updated_at: int
    local_sync_status: SyncStatus
    server_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ListBookResponse(BaseModel):
    """Membership row response."""

    id: str
    list_id: str
    book_id: str
    added_at: int
    sort_order: int
    updated_at: int
    local_sync_status: SyncStatus
    server_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AddBookResult(BaseModel):
    """Result of adding a book to a list."""

    book: SavedBookResponse
    list_book: ListBookResponse


class ToggleResult(BaseModel):
    """Membership after a toggle: True when the book is now in the list."""

    in_list: bool


class BookListsResponse(BaseModel):
    """Lists containing a given book."""

    book_id: str
    lists: list[ReadingListResponse]
