"""Backup API endpoints."""

from fastapi import APIRouter, Query, Request, Response

from bookshelf.api.v1.deps import Backup, Stats
from bookshelf.schemas.backup import ImportMode, ImportResult, LibraryStats
from bookshelf.schemas.common import ErrorResponse

router = APIRouter()


@router.get(
    "/export",
    summary="Export library",
    description="Full JSON snapshot of lists, books and memberships, served as a download.",
)
async def export_library(backup: Backup) -> Response:
    document = await backup.export_library_json()
    filename = backup.get_export_filename()
    return Response(
        content=document,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/import",
    response_model=ImportResult,
    summary="Import library",
    description="""
Import a document produced by `/backup/export`. The raw request body is the
document.

- `merge` keeps existing data, fills empty ratings/notes and keeps the
  higher progress.
- `replace` removes books, memberships and custom lists first.
    """,
    responses={
        422: {"model": ErrorResponse, "description": "Malformed document, unsupported version or bad shape"},
    },
)
async def import_library(
    request: Request,
    backup: Backup,
    mode: ImportMode = Query("merge", description="merge or replace"),
) -> ImportResult:
    body = await request.body()
    return await backup.import_library(body, mode=mode)


@router.get(
    "/stats",
    response_model=LibraryStats,
    summary="Library statistics",
)
async def get_stats(stats: Stats) -> LibraryStats:
    return await stats.get_library_stats()
