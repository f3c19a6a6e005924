"""Saved book API endpoints."""

from fastapi import APIRouter

from bookshelf.api.v1.deps import Library
from bookshelf.schemas.library import (
    BookListsResponse,
    CurrentPageUpdate,
    NotesUpdate,
    PagesUpdate,
    ProgressUpdate,
    RatingUpdate,
    ReadingListResponse,
    SavedBookResponse,
)

router = APIRouter()


@router.get(
    "",
    response_model=list[SavedBookResponse],
    summary="List saved books",
    description="All saved books, newest first, whether or not they are in a list.",
)
async def get_books(library: Library) -> list[SavedBookResponse]:
    return await library.get_all_books()


@router.get(
    "/{book_id}",
    response_model=SavedBookResponse,
    summary="Get a saved book",
)
async def get_book(book_id: str, library: Library) -> SavedBookResponse:
    return await library.get_book(book_id)


@router.delete(
    "/{book_id}",
    status_code=204,
    summary="Delete a saved book",
    description="Removes the book and every list membership it has.",
)
async def delete_book(book_id: str, library: Library) -> None:
    await library.delete_book(book_id)


@router.get(
    "/{book_id}/lists",
    response_model=BookListsResponse,
    summary="Lists containing a book",
)
async def get_lists_for_book(book_id: str, library: Library) -> BookListsResponse:
    lists: list[ReadingListResponse] = await library.get_lists_for_book(book_id)
    return BookListsResponse(book_id=book_id, lists=lists)


@router.put(
    "/{book_id}/rating",
    response_model=SavedBookResponse,
    summary="Rate a book",
    description="Ratings outside 0-5 are clamped.",
)
async def set_rating(book_id: str, data: RatingUpdate, library: Library) -> SavedBookResponse:
    return await library.set_book_rating(book_id, data.rating)


@router.put(
    "/{book_id}/progress",
    response_model=SavedBookResponse,
    summary="Set reading progress",
    description="Progress outside 0-100 is clamped.",
)
async def set_progress(book_id: str, data: ProgressUpdate, library: Library) -> SavedBookResponse:
    return await library.set_book_progress(book_id, data.progress)


@router.put(
    "/{book_id}/notes",
    response_model=SavedBookResponse,
    summary="Set notes",
)
async def set_notes(book_id: str, data: NotesUpdate, library: Library) -> SavedBookResponse:
    return await library.set_book_notes(book_id, data.notes)


@router.put(
    "/{book_id}/pages",
    response_model=SavedBookResponse,
    summary="Enable page tracking",
)
async def set_pages(book_id: str, data: PagesUpdate, library: Library) -> SavedBookResponse:
    return await library.set_book_pages(book_id, data.total_pages, data.current_page)


@router.put(
    "/{book_id}/current-page",
    response_model=SavedBookResponse,
    summary="Update current page",
)
async def update_current_page(
    book_id: str,
    data: CurrentPageUpdate,
    library: Library,
) -> SavedBookResponse:
    return await library.update_current_page(book_id, data.current_page)


@router.post(
    "/{book_id}/start",
    response_model=SavedBookResponse,
    summary="Start reading",
)
async def start_reading(book_id: str, library: Library) -> SavedBookResponse:
    return await library.start_reading(book_id)


@router.post(
    "/{book_id}/finish",
    response_model=SavedBookResponse,
    summary="Finish reading",
    description="Sets progress to 100% and moves the book from Reading to Read.",
)
async def finish_reading(book_id: str, library: Library) -> SavedBookResponse:
    return await library.finish_reading(book_id)
