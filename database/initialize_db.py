"""
Database Initialization
Manages the SQLite store for the animals demo with typed helpers and a declarative schema registry.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Final

from config.app_config import load_config

from .resilient_db import ResilientDB

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

LOGGER = logging.getLogger(__name__)

# Declarative schema definitions (idempotent DDLs)
SCHEMA_DDLS: Final[dict[str, list[str]]] = {
    "animals": [
        """
            CREATE TABLE IF NOT EXISTS Animals (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                habitat TEXT NOT NULL,
                life_expectancy INTEGER,
                in_danger INTEGER
            )
        """,
    ],
}


def _resolve_db_path(db_path: Path | str | None) -> Path:
    """Pick the store path: explicit argument, then configuration (animals.db by default)."""
    if db_path is not None:
        return Path(db_path)
    return load_config().db_path


def _exec_ddl_batch(conn: sqlite3.Connection, ddls: list[str]) -> None:
    """Execute a batch of DDL statements and commit once at the end."""
    cur = conn.cursor()
    for sql in ddls:
        cur.execute(sql)
    conn.commit()


class DatabaseManager:
    """Owns the single connection to the animals store"""

    def __init__(
        self,
        db_path: Path | str | None = None,
        user_feedback: Callable[[str], None] | None = None,
    ):
        self.db_path = _resolve_db_path(db_path)
        self.user_feedback = user_feedback or print

        self._connection: sqlite3.Connection | None = None
        self._connection_lock = threading.Lock()

    def __enter__(self) -> DatabaseManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.is_open:
            try:
                self.close()
            except sqlite3.Error as e:
                LOGGER.warning("Error closing %s on exit: %s", self.db_path, e)

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def connect(self) -> sqlite3.Connection:
        """Open or create the store file; reuses the tracked connection if already open."""
        with self._connection_lock:
            if self._connection is None:
                db = ResilientDB(self.db_path, user_feedback=self.user_feedback)
                conn = db.connect()
                conn.row_factory = sqlite3.Row
                self._connection = conn
                LOGGER.debug("Opened %s", self.db_path)
            return self._connection

    def ensure_schema(self, db_key: str = "animals") -> None:
        """Apply the idempotent schema DDLs for db_key on the open connection."""
        if ddls := SCHEMA_DDLS.get(db_key, []):
            _exec_ddl_batch(self.connect(), ddls)

    def get_animals_connection(self) -> sqlite3.Connection:
        """Get the animals connection, opening it and ensuring the schema if needed"""
        if self._connection is not None:
            return self._connection
        conn = self.connect()
        self.ensure_schema("animals")
        return conn

    def table_exists(self, table: str) -> bool:
        """Return True if exactly one table named table exists in the store."""
        row = self.connect().execute(
            "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        ).fetchone()
        return bool(row and row[0] == 1)

    def close(self) -> bool:
        """Close the tracked connection.

        Returns:
            True if a connection was closed, False if nothing was open.

        Raises:
            sqlite3.Error: If the engine fails to close the connection.
        """
        with self._connection_lock:
            conn = self._connection
            if conn is None:
                return False
            conn.close()
            self._connection = None
        LOGGER.debug("Closed %s", self.db_path)
        return True


def initialize_database(
    db_path: Path | str | None = None,
    user_feedback: Callable[[str], None] | None = None,
) -> DatabaseManager:
    """Convenience function to open the store and ensure its schema

    Args:
        db_path: Store file (defaults to configuration, then animals.db)
        user_feedback: Function to provide setup feedback (defaults to print)

    Returns:
        DatabaseManager: Manager holding the open connection
    """
    manager = DatabaseManager(db_path, user_feedback)
    manager.connect()
    manager.ensure_schema()
    return manager
