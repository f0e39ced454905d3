"""Database wrapper and utilities.

Convention for db queries:
- db.query() returns list[dict[str, Any]] for multiple rows
- db.query_one() returns dict[str, Any] | None for single row (None if not found)
- db.execute() for INSERT/UPDATE/DELETE, returns None
- All rows returned as dicts with column names as keys
"""
import sqlite3
from typing import Any


class Database:
    """Wrapper around sqlite3 connection for convenient query methods."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn
        self._conn.row_factory = sqlite3.Row
        # WAL lets region queries read while ops are being integrated
        self._conn.execute("PRAGMA journal_mode = WAL")

    def query(self, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        """Execute query and return all rows as list of dicts."""
        cursor = self._conn.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def query_one(self, sql: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        """Execute query and return single row as dict, or None if not found."""
        cursor = self._conn.execute(sql, params)
        row = cursor.fetchone()
        return dict(row) if row else None

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> None:
        """Execute INSERT/UPDATE/DELETE statement."""
        self._conn.execute(sql, params)

    def commit(self) -> None:
        """Commit the current transaction."""
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


def open_database(path: str = ":memory:") -> Database:
    """Open (or create) a database and make sure all tables exist."""
    import schema
    db = Database(sqlite3.connect(path))
    schema.create_all(db)
    return db
