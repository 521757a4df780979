import sqlite3
from pathlib import Path

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator

MIGRATIONS_DIR = str(Path(__file__).parent.parent.parent / "migrations")


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "test_db.sqlite")


def table_names(db_path):
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        return {r[0] for r in rows}
    finally:
        conn.close()


def test_migrator_applies_initial(temp_db_path):
    applied = SQLiteMigrator(temp_db_path, MIGRATIONS_DIR).run_migrations()

    assert applied == ["0001_initial.sql"]
    assert {
        "_migrations",
        "users",
        "posts",
        "post_categories",
        "post_tags",
        "comments",
        "categories",
        "tags",
    } <= table_names(temp_db_path)


def test_migrator_is_idempotent(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path, MIGRATIONS_DIR)
    migrator.run_migrations()

    assert migrator.run_migrations() == []
    assert migrator.applied_migrations() == {"0001_initial.sql"}


def test_down_section_is_not_applied(temp_db_path):
    SQLiteMigrator(temp_db_path, MIGRATIONS_DIR).run_migrations()

    # The down script drops every table; it must not have run.
    assert "posts" in table_names(temp_db_path)


def test_published_slugs_are_unique(temp_db_path):
    SQLiteMigrator(temp_db_path, MIGRATIONS_DIR).run_migrations()
    conn = sqlite3.connect(temp_db_path)
    conn.execute("INSERT INTO users (id, email, created_at) VALUES ('u1', 'a@b.c', 'now')")
    insert = (
        "INSERT INTO posts (id, title, content, slug, author_id, status, created_at, updated_at) "
        "VALUES (?, 'T', 'C', 'same', 'u1', ?, 'now', 'now')"
    )
    conn.execute(insert, ("p1", "draft"))
    conn.execute(insert, ("p2", "draft"))
    conn.execute(insert, ("p3", "published"))

    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(insert, ("p4", "published"))
    conn.close()


def test_broken_migration_raises(tmp_path, temp_db_path):
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "0001_broken.sql").write_text("CREATE TABLE oops (;")

    with pytest.raises(RuntimeError, match="0001_broken.sql"):
        SQLiteMigrator(temp_db_path, str(migrations)).run_migrations()
