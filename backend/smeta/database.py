# backend/smeta/database.py
from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .utils.logging import db_logger

Base = declarative_base()

# Columns added after the first release; older database files get them on startup
LATE_COLUMNS = {
    "documents": {"display_name": "TEXT"},
    "kpi_items": {"file_name": "TEXT"},
}


def _enable_wal(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        # In-memory databases silently stay in "memory" journal mode
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


class Database:
    """Owns the engine and session factory for one application instance"""

    def __init__(self, url: str, echo: bool = False):
        self.url = str(url)
        self.echo = echo
        self.engine: Engine | None = None
        self.SessionLocal: sessionmaker | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Database":
        if self.is_open:
            return self

        url = make_url(self.url)
        is_sqlite = url.get_backend_name() == "sqlite"
        if is_sqlite and url.database and url.database != ":memory:":
            # Ensure data directory exists
            Path(url.database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

        db_logger.info(f"Connecting to database: {self.url}")
        self.engine = create_engine(
            self.url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            echo=self.echo  # This will log all SQL statements
        )
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_wal)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.init_schema()
        return self

    def init_schema(self) -> None:
        """Create tables, indexes and triggers, then add any missing late columns"""
        # Register all models on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

        inspector = inspect(self.engine)
        with self.engine.begin() as connection:
            for table, columns in LATE_COLUMNS.items():
                existing = {column["name"] for column in inspector.get_columns(table)}
                for column, column_type in columns.items():
                    if column in existing:
                        continue
                    db_logger.info("Running migration: adding column", extra={
                        "table": table,
                        "column": column
                    })
                    connection.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}"))

        db_logger.info("Database initialization complete")

    def session(self) -> Session:
        if not self.is_open:
            raise RuntimeError("Database is not open")
        return self.SessionLocal()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            db_logger.info("Database connection closed")
        self.engine = None
        self.SessionLocal = None


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
