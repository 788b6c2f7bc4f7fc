# resilient_db.py
# Open-or-create wrapper for the SQLite store with recovery for first-time setup and damaged files.

import os
import shutil
import sqlite3
from collections.abc import Callable
from datetime import datetime
from pathlib import Path


class ResilientDB:
    """A wrapper that makes opening the SQLite store safer and more user-friendly."""

    def __init__(
        self,
        db_path: Path,
        user_feedback: Callable[[str], None] | None = None,
    ):
        self.db_path = Path(db_path)
        self.user_feedback = user_feedback or print

    def log(self, message: str) -> None:
        self.user_feedback(f"{message}")

    def connect(self) -> sqlite3.Connection:
        """Open or create the database file.

        Raises:
            RuntimeError: If the folder or file cannot be reached for permission reasons.
            sqlite3.Error: For any other engine failure.
        """
        try:
            return self._connect_with_recovery()
        except PermissionError as exc:
            self.log(
                "Permission denied accessing database folder. Please check folder permissions."
            )
            raise RuntimeError(
                "Cannot access database due to permission restrictions.") from exc

    def _connect_with_recovery(self) -> sqlite3.Connection:
        """Attempt the connection, recovering once from a missing folder or damaged file."""
        try:
            return self._attempt_connection()
        except sqlite3.OperationalError as e:
            if "unable to open database file" not in str(e):
                raise
            folder = self.db_path.parent
            if not folder.exists():
                self.log(
                    "Creating database folder - this is normal for first-time setup.")
                folder.mkdir(parents=True, exist_ok=True)
                return self._attempt_connection()
            if not os.access(folder, os.W_OK | os.X_OK):
                raise PermissionError(f"No write access to {folder}") from e
            raise
        except sqlite3.DatabaseError as e:
            if "file is not a database" in str(e) or "database disk image is malformed" in str(e):
                self.log(
                    "Found a damaged database file. Creating a backup and starting fresh...")
                self._backup_corrupted_db()
                return self._attempt_connection()
            raise

    def _attempt_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        try:
            # Test the connection
            conn.execute("SELECT 1")
            # Force a header read so a damaged file fails here rather than later
            conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _backup_corrupted_db(self) -> None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_dir = self.db_path.parent / "backups"
        backup_dir.mkdir(exist_ok=True)
        backup_path = backup_dir / \
            f"{self.db_path.stem}_corrupted_{timestamp}.db"
        try:
            shutil.move(self.db_path, backup_path)
            self.log(f"Backup saved to: {backup_path}")
        except OSError:
            # If we can't move it, just delete it
            self.db_path.unlink(missing_ok=True)
            self.log("Removed damaged database file.")
