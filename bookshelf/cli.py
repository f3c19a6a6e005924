"""Command line interface for local library maintenance.

Usage:
    bookshelf seed
    bookshelf export [--output PATH]
    bookshelf import PATH [--mode merge|replace]
    bookshelf stats
    bookshelf serve [--host HOST] [--port PORT]
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import aiofiles
import structlog
import uvicorn

from bookshelf.config import settings
from bookshelf.core.exceptions import LibraryError
from bookshelf.core.logging import configure_logging
from bookshelf.db.seed import initialize_default_lists
from bookshelf.db.store import LibraryStore
from bookshelf.main import create_app
from bookshelf.services.backup_service import BackupService
from bookshelf.services.stats_service import StatsService

logger = structlog.get_logger(__name__)


async def seed(store: LibraryStore, args: argparse.Namespace) -> int:
    created = await initialize_default_lists(store)
    print("System lists created" if created else "System lists already present")
    return 0


async def export(store: LibraryStore, args: argparse.Namespace) -> int:
    backup = BackupService(store)
    document = await backup.export_library_json()
    output = Path(args.output) if args.output else Path(backup.get_export_filename())

    async with aiofiles.open(output, "w", encoding="utf-8") as f:
        await f.write(document)

    print(f"Exported library to {output}")
    return 0


async def import_(store: LibraryStore, args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 1

    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        document = await f.read()

    result = await BackupService(store).import_library(document, mode=args.mode)
    print(
        f"Imported {result.lists_imported} lists, {result.books_imported} books, "
        f"{result.list_books_imported} list entries ({args.mode})"
    )
    return 0


async def stats(store: LibraryStore, args: argparse.Namespace) -> int:
    library_stats = await StatsService(store).get_library_stats()
    print(json.dumps(library_stats.model_dump(by_alias=True), indent=2))
    return 0


COMMANDS = {
    "seed": seed,
    "export": export,
    "import": import_,
    "stats": stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookshelf",
        description="Manage the local reading library",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help=f"Database URL (default: {settings.database_url})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("seed", help="Create the system reading lists")

    export_parser = subparsers.add_parser("export", help="Write a JSON backup")
    export_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file (default: dated file in the current directory)",
    )

    import_parser = subparsers.add_parser("import", help="Restore a JSON backup")
    import_parser.add_argument("path", help="Backup file to import")
    import_parser.add_argument(
        "--mode",
        choices=["merge", "replace"],
        default="merge",
        help="merge keeps existing data, replace wipes books and custom lists first",
    )

    subparsers.add_parser("stats", help="Print library counts")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)
    return parser


async def run(args: argparse.Namespace) -> int:
    store = LibraryStore.from_url(args.database_url)
    try:
        await store.create_all()
        if args.command != "seed":
            await initialize_default_lists(store)
        return await COMMANDS[args.command](store, args)
    except LibraryError as e:
        logger.error("Command failed", command=args.command, code=e.code, message=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await store.dispose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        uvicorn.run(create_app(database_url=args.database_url), host=args.host, port=args.port)
        return 0
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
