"""Alembic migration tests."""

import sqlite3
from pathlib import Path

from alembic import command
from alembic.config import Config

ROOT = Path(__file__).resolve().parents[2]


def alembic_config(db_path: Path) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ROOT / "bookshelf" / "db" / "migrations"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


def columns(db_path: Path, table: str) -> set[str]:
    with sqlite3.connect(db_path) as conn:
        return {row[1] for row in conn.execute(f"PRAGMA table_info({table})")}


def test_upgrade_head_creates_schema(tmp_path):
    db_path = tmp_path / "migrated.db"

    command.upgrade(alembic_config(db_path), "head")

    assert {"id", "name", "list_type", "icon", "color", "sort_order"} <= columns(db_path, "reading_lists")
    assert {"total_pages", "current_page", "reading_started_at", "reading_finished_at"} <= columns(
        db_path, "saved_books"
    )
    assert {"list_id", "book_id", "added_at", "sort_order"} <= columns(db_path, "list_books")


def test_first_revision_has_no_page_tracking(tmp_path):
    db_path = tmp_path / "v1.db"

    command.upgrade(alembic_config(db_path), "0001")

    assert "total_pages" not in columns(db_path, "saved_books")


def test_downgrade_to_base(tmp_path):
    db_path = tmp_path / "roundtrip.db"
    config = alembic_config(db_path)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    with sqlite3.connect(db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert "saved_books" not in tables
