# backend/smeta/models/columns.py
from datetime import datetime, timezone

from sqlalchemy import DDL, Enum, event


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def string_enum(enum_cls, name: str) -> Enum:
    """Store a str-valued enum by value, guarded by a CHECK constraint"""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


def add_updated_at_trigger(table) -> None:
    """Keep `updated_at` current on every UPDATE of the table (SQLite only)"""
    trigger = DDL(
        f"CREATE TRIGGER IF NOT EXISTS update_{table.name}_timestamp "
        f"AFTER UPDATE ON {table.name} "
        f"BEGIN "
        f"UPDATE {table.name} SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id; "
        f"END;"
    )
    event.listen(table, "after_create", trigger.execute_if(dialect="sqlite"))
