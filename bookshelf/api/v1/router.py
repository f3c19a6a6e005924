"""Main API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from bookshelf.api.v1 import backup, books, health, lists

api_router = APIRouter()

# Health check
api_router.include_router(health.router, tags=["Health"])

# Reading lists and membership
api_router.include_router(lists.router, prefix="/lists", tags=["Lists"])

# Saved books and reading progress
api_router.include_router(books.router, prefix="/books", tags=["Books"])

# Export / import
api_router.include_router(backup.router, prefix="/backup", tags=["Backup"])
