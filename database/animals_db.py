"""
AnimalsDatabase - parameterized CRUD over the Animals table via DatabaseManager.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Protocol

from models.animal import Animal
from utils.logger import Logger

INSERT_ANIMAL_SQL = """
    INSERT INTO Animals (name, habitat, life_expectancy, in_danger)
    VALUES (?, ?, ?, ?)
"""
SELECT_ALL_SQL = "SELECT * FROM Animals ORDER BY id"
SELECT_LIFE_EXPECTANCY_OVER_SQL = "SELECT * FROM Animals WHERE life_expectancy > ? ORDER BY id"
SELECT_BY_NAME_SQL = "SELECT * FROM Animals WHERE name = ? ORDER BY id LIMIT 1"
UPDATE_IN_DANGER_SQL = "UPDATE Animals SET in_danger = ? WHERE name = ?"
DELETE_BY_NAME_SQL = "DELETE FROM Animals WHERE name = ?"


class DBManagerProtocol(Protocol):
    """Protocol for database manager expected by AnimalsDatabase."""

    def get_animals_connection(self) -> sqlite3.Connection: ...


class AnimalsDatabase:
    """Handles Animals table persistence using DatabaseManager.

    Schema is created by DatabaseManager.ensure_schema.
    """

    def __init__(self, db_manager: DBManagerProtocol) -> None:
        self.db_manager: DBManagerProtocol = db_manager
        self.logger = Logger()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection"""
        return self.db_manager.get_animals_connection()

    def _fetch_animals(self, sql: str, params: tuple[Any, ...] = ()) -> list[Animal]:
        cursor = self._get_connection().execute(sql, params)
        return [Animal.from_row(row) for row in cursor.fetchall()]

    def _execute_write(self, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        conn = self._get_connection()
        cursor = conn.execute(sql, params)
        conn.commit()
        return cursor

    def create_animal(self, animal: Animal) -> dict[str, Any]:
        """Insert an animal and report the row id the store assigned.

        Returns:
            {"success": True, "id": rowid} or {"success": False, "error": message}
        """
        try:
            cursor = self._execute_write(INSERT_ANIMAL_SQL, animal.to_db_params())
        except sqlite3.Error as e:
            self.logger.error(f"Error inserting {animal.name}: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True, "id": cursor.lastrowid}

    def get_all_animals(self) -> list[Animal]:
        """Return every record, oldest first."""
        return self._fetch_animals(SELECT_ALL_SQL)

    def get_animals_by_min_life_expectancy(self, threshold: int) -> list[Animal]:
        """Return records whose life expectancy is strictly greater than threshold.

        Records with no life expectancy never match.
        """
        return self._fetch_animals(SELECT_LIFE_EXPECTANCY_OVER_SQL, (threshold,))

    def get_animal_by_name(self, name: str) -> Animal | None:
        animals = self._fetch_animals(SELECT_BY_NAME_SQL, (name,))
        return animals[0] if animals else None

    def set_in_danger(self, name: str, in_danger: bool = True) -> int:
        """Set the in-danger flag on every record called name; returns rows affected."""
        cursor = self._execute_write(UPDATE_IN_DANGER_SQL, (1 if in_danger else 0, name))
        return cursor.rowcount

    def delete_animal(self, name: str) -> int:
        """Delete every record called name; returns rows affected."""
        cursor = self._execute_write(DELETE_BY_NAME_SQL, (name,))
        return cursor.rowcount
