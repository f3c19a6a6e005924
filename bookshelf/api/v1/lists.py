"""Reading list API endpoints."""

from fastapi import APIRouter

from bookshelf.api.v1.deps import Library
from bookshelf.schemas.common import ErrorResponse
from bookshelf.schemas.library import (
    AddBookResult,
    BookInput,
    ListCreate,
    ListUpdate,
    ListWithCount,
    ReadingListResponse,
    SavedBookResponse,
    ToggleResult,
)

router = APIRouter()

NOT_FOUND_RESPONSES = {
    404: {"model": ErrorResponse, "description": "List not found"},
}

PROTECTED_RESPONSES = {
    403: {"model": ErrorResponse, "description": "System lists cannot be deleted"},
    **NOT_FOUND_RESPONSES,
}


@router.get(
    "",
    response_model=list[ListWithCount],
    summary="List reading lists",
    description="All reading lists in display order, with their book counts.",
)
async def get_lists(library: Library) -> list[ListWithCount]:
    return await library.get_lists_with_counts()


@router.post(
    "",
    response_model=ReadingListResponse,
    status_code=201,
    summary="Create a custom list",
)
async def create_list(data: ListCreate, library: Library) -> ReadingListResponse:
    return await library.create_list(data.name, icon=data.icon, color=data.color)


@router.get(
    "/{list_id}",
    response_model=ReadingListResponse,
    summary="Get a reading list",
)
async def get_list(list_id: str, library: Library) -> ReadingListResponse:
    return await library.get_list(list_id)


@router.patch(
    "/{list_id}",
    response_model=ReadingListResponse,
    summary="Update a list",
    description="Rename or restyle a list, system lists included.",
    responses=NOT_FOUND_RESPONSES,
)
async def update_list(list_id: str, data: ListUpdate, library: Library) -> ReadingListResponse:
    return await library.update_list(list_id, name=data.name, icon=data.icon, color=data.color)


@router.delete(
    "/{list_id}",
    status_code=204,
    summary="Delete a custom list",
    description="Deletes the list and its memberships; the books stay saved. System lists answer 403.",
    responses=PROTECTED_RESPONSES,
)
async def delete_list(list_id: str, library: Library) -> None:
    await library.delete_list(list_id)


@router.get(
    "/{list_id}/books",
    response_model=list[SavedBookResponse],
    summary="Books in a list",
)
async def get_books_in_list(list_id: str, library: Library) -> list[SavedBookResponse]:
    await library.get_list(list_id)
    return await library.get_books_in_list(list_id)


@router.post(
    "/{list_id}/books",
    response_model=AddBookResult,
    status_code=201,
    summary="Add a book to a list",
    description="Saves the book on first use; adding a book twice is a no-op.",
)
async def add_book_to_list(list_id: str, data: BookInput, library: Library) -> AddBookResult:
    return await library.add_book_to_list(data, list_id)


@router.delete(
    "/{list_id}/books/{book_id}",
    status_code=204,
    summary="Remove a book from a list",
)
async def remove_book_from_list(list_id: str, book_id: str, library: Library) -> None:
    await library.remove_book_from_list(book_id, list_id)


@router.post(
    "/{list_id}/toggle",
    response_model=ToggleResult,
    summary="Toggle list membership",
)
async def toggle_book_in_list(list_id: str, data: BookInput, library: Library) -> ToggleResult:
    return ToggleResult(in_list=await library.toggle_book_in_list(data, list_id))
