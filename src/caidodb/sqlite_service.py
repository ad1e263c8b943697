"""SQLite implementation of ProjectService."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from caidodb.service import ProjectService
from caidodb.types import Params, Row

logger = logging.getLogger(__name__)

MAIN_DB_FILENAME = "database.caido"
RAW_DB_FILENAME = "database_raw.caido"
RAW_SCHEMA = "raw"


class SQLiteProjectService(ProjectService):
    """Caido project backend using stdlib sqlite3.

    Runs in autocommit mode: every statement outside transaction() is
    committed on its own.
    """

    def __init__(self, project_dir: str | Path):
        self._project_dir = Path(project_dir)
        self._conn: sqlite3.Connection | None = None
        self._in_transaction = False

    @property
    def main_db_path(self) -> Path:
        return self._project_dir / MAIN_DB_FILENAME

    @property
    def raw_db_path(self) -> Path:
        return self._project_dir / RAW_DB_FILENAME

    def connect(self) -> None:
        main_path = self.main_db_path
        if not main_path.is_file():
            raise FileNotFoundError(f"Caido main database does not exist at {main_path}")

        conn = sqlite3.connect(main_path, isolation_level=None)
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
            logger.info("Opened %s", MAIN_DB_FILENAME)

            raw_path = self.raw_db_path
            if not raw_path.is_file():
                raise FileNotFoundError(f"Caido raw database does not exist at {raw_path}")
            conn.execute(f"ATTACH DATABASE ? AS {RAW_SCHEMA}", (str(raw_path),))
            logger.info("Attached %s", RAW_DB_FILENAME)
        except Exception:
            conn.close()
            raise
        self._conn = conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        raise RuntimeError("Not connected. Call `service.connect()` first.")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._get_conn()
        if self._in_transaction:
            raise RuntimeError("Nested transactions are not supported.")
        conn.execute("BEGIN")
        self._in_transaction = True
        try:
            yield
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            self._in_transaction = False

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        cursor = conn.execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def insert(self, table: str, columns: list[str], row: tuple) -> int:
        conn = self._get_conn()
        cols = ", ".join(columns)
        placeholders = ", ".join("?" for _ in columns)
        cursor = conn.execute(f"INSERT INTO {table} ({cols}) VALUES ({placeholders})", row)
        return cursor.lastrowid

    def insert_default(self, table: str) -> int:
        conn = self._get_conn()
        cursor = conn.execute(f"INSERT INTO {table} DEFAULT VALUES")
        return cursor.lastrowid
