"""SQLite file holding the few settings that outlive a session.

Schema changes live in ``storage/migrations`` as modules with an
``upgrade(conn)`` function. The number of applied migrations is kept in
SQLite's own ``user_version`` header field.
"""
from __future__ import annotations

import contextlib
import importlib
import logging
import pathlib
import sqlite3
from typing import Iterator

logger = logging.getLogger(__name__)

_MIGRATIONS = [
    "001_settings",
]


class Database:
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path)
            self._connection.row_factory = sqlite3.Row
        return self._connection

    @property
    def schema_version(self) -> int:
        return self.connection.execute("PRAGMA user_version").fetchone()[0]

    def initialize(self) -> None:
        """Bring the schema up to date. Safe to call on every launch."""
        current = self.schema_version
        for version, name in enumerate(_MIGRATIONS[current:], current + 1):
            logger.info(f"Applying migration {name}")
            with self.get_connection() as conn:
                importlib.import_module(f"glitch_city.storage.migrations.{name}").upgrade(conn)
                # PRAGMA does not take bound parameters
                conn.execute(f"PRAGMA user_version = {version:d}")

    @contextlib.contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """Yield the shared connection; commit on success, roll back on error."""
        conn = self.connection
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
