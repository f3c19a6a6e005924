"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookshelf.api.v1.router import api_router
from bookshelf.config import settings
from bookshelf.core.exceptions import LibraryError
from bookshelf.core.logging import configure_logging
from bookshelf.db.seed import initialize_default_lists
from bookshelf.db.store import LibraryStore

configure_logging()

logger = structlog.get_logger(__name__)

OPENAPI_TAGS = [
    {
        "name": "Health",
        "description": "Store availability check.",
    },
    {
        "name": "Lists",
        "description": """
**Reading Lists**

System lists (Reading, Will Read, Read) are created on first start and
can be renamed but not deleted. Custom lists are appended after the last list.
        """,
    },
    {
        "name": "Books",
        "description": """
**Saved Books & Reading Progress**

Books are cached the first time they are added to a list and are kept when
removed from every list. Ratings are clamped to 0-5, progress to 0-100.
        """,
    },
    {
        "name": "Backup",
        "description": """
**JSON Backup & Restore**

`merge` keeps existing data and fills gaps (progress only moves forward);
`replace` wipes books, memberships and custom lists before importing.
        """,
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Bookshelf", version=settings.app_version, env=settings.environment)

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = LibraryStore.from_url(app.state.database_url)
        await app.state.store.create_all()

    if settings.seed_on_startup:
        await initialize_default_lists(app.state.store)

    yield

    logger.info("Shutting down Bookshelf")
    if owns_store:
        await app.state.store.dispose()


def create_app(store: LibraryStore | None = None, database_url: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Passing ``store`` makes the app use it instead of opening a database.
    Otherwise the app opens ``database_url``, or the configured database.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Local reading library: lists, saved books, progress and JSON backups.",
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.database_url = database_url or settings.database_url

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Response:
        """Add unique request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
        """Render library errors in the standard error envelope."""
        if exc.status_code >= 500:
            logger.error("Library error", code=exc.code, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "requestId": request.headers.get("X-Request-ID"),
                }
            },
        )

    app.include_router(api_router, prefix="/v1")

    return app


app = create_app()
