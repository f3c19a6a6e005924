"""Command line tests."""

import json

import pytest

from bookshelf.cli import main


@pytest.fixture
def db_args(tmp_path) -> list[str]:
    return ["--database-url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"]


def test_seed_then_stats(db_args, capsys):
    assert main([*db_args, "seed"]) == 0
    assert "System lists created" in capsys.readouterr().out

    assert main([*db_args, "seed"]) == 0
    assert "already present" in capsys.readouterr().out

    assert main([*db_args, "stats"]) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats["totalLists"] == 3
    assert stats["totalBooks"] == 0


def test_export_and_import(db_args, tmp_path, capsys):
    output = tmp_path / "backup.json"

    assert main([*db_args, "export", "--output", str(output)]) == 0
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["version"] == 1
    assert len(document["lists"]) == 3

    document["books"].append({"id": "b1", "workKey": "OL1W", "title": "Imported"})
    document["listBooks"].append({"listId": "system:reading", "bookId": "b1", "sortOrder": 0})
    output.write_text(json.dumps(document), encoding="utf-8")
    capsys.readouterr()

    assert main([*db_args, "import", str(output), "--mode", "replace"]) == 0
    assert "1 books" in capsys.readouterr().out

    assert main([*db_args, "stats"]) == 0
    assert json.loads(capsys.readouterr().out)["totalBooks"] == 1


def test_import_rejects_bad_document(db_args, tmp_path, capsys):
    path = tmp_path / "future.json"
    path.write_text(json.dumps({"version": 5, "lists": [], "books": [], "listBooks": []}), encoding="utf-8")

    assert main([*db_args, "import", str(path)]) == 1
    assert "Unsupported backup version" in capsys.readouterr().err


def test_import_missing_file(db_args, tmp_path, capsys):
    assert main([*db_args, "import", str(tmp_path / "nope.json")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_serve_uses_database_url(db_args, monkeypatch):
    calls = []
    monkeypatch.setattr("bookshelf.cli.uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main([*db_args, "serve", "--port", "9001"]) == 0

    app, kwargs = calls[0]
    assert app.state.database_url == db_args[1]
    assert app.state.store is None
    assert kwargs["port"] == 9001
