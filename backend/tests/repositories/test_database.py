# tests/repositories/test_database.py
import pytest
from sqlalchemy import create_engine, inspect, text

from smeta.database import Database


def test_tables_created(database):
    tables = set(inspect(database.engine).get_table_names())

    assert {"documents", "capas", "kpi_items"} <= tables


def test_wal_journal_mode(database):
    with database.engine.connect() as connection:
        mode = connection.execute(text("PRAGMA journal_mode")).scalar()

    assert mode.lower() == "wal"


def test_updated_at_triggers(database):
    with database.engine.connect() as connection:
        triggers = set(connection.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'trigger'")
        ).scalars())

    assert triggers == {
        "update_documents_timestamp",
        "update_capas_timestamp",
        "update_kpi_items_timestamp",
    }


def test_open_is_idempotent(database):
    engine = database.engine

    assert database.open() is database
    assert database.engine is engine


def test_session_requires_open_database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'closed.db'}")

    with pytest.raises(RuntimeError):
        database.session()


def test_late_columns_added_to_existing_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'legacy.db'}"
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.execute(text(
            "CREATE TABLE documents ("
            "id INTEGER PRIMARY KEY, filename TEXT NOT NULL, original_filename TEXT NOT NULL, "
            "pillar TEXT NOT NULL, category TEXT, file_type TEXT NOT NULL, file_size INTEGER NOT NULL, "
            "upload_date DATETIME, file_path TEXT NOT NULL UNIQUE, created_at DATETIME, updated_at DATETIME)"
        ))
        connection.execute(text(
            "INSERT INTO documents (filename, original_filename, pillar, category, file_type, file_size, file_path) "
            "VALUES ('a.pdf', 'a.pdf', 'pillar-1', 'forms', 'application/pdf', 3, 'documents/pillar-1/forms/a.pdf')"
        ))
    engine.dispose()

    database = Database(url).open()
    try:
        columns = {column["name"] for column in inspect(database.engine).get_columns("documents")}
        assert "display_name" in columns

        with database.engine.connect() as connection:
            count = connection.execute(text("SELECT COUNT(*) FROM documents")).scalar()
        assert count == 1
    finally:
        database.close()
