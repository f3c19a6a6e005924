"""Health check endpoint."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from sqlalchemy import text

from bookshelf.api.v1.deps import Store
from bookshelf.config import settings
from bookshelf.core.exceptions import StorageError
from bookshelf.db.seed import is_seed_initialized

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="""
Store health check.

**Checks:**
- Database connectivity
- System lists seeded

**Status Values:**
- `healthy` - Store reachable and seeded
- `degraded` - Store reachable but system lists missing, or unreachable
    """,
)
async def health_check(store: Store) -> dict[str, Any]:
    """Health check endpoint."""
    health_status = {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
        "checks": {},
    }

    try:
        async with store.read() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
        health_status["checks"]["database"] = "healthy"
    except StorageError as e:
        health_status["status"] = "degraded"
        health_status["checks"]["database"] = f"unhealthy: {e.message}"
        return health_status

    if await is_seed_initialized(store):
        health_status["checks"]["seed"] = "healthy"
    else:
        health_status["status"] = "degraded"
        health_status["checks"]["seed"] = "system lists missing"

    return health_status
