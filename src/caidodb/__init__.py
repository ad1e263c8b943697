"""Caido project datastore layer: factory and public API."""

from pathlib import Path

from caidodb.service import ProjectService
from caidodb.sqlite_service import (
    MAIN_DB_FILENAME,
    RAW_DB_FILENAME,
    RAW_SCHEMA,
    SQLiteProjectService,
)
from caidodb.types import Params, Row


def create_service(project_dir: str | Path) -> ProjectService:
    """Create a ProjectService for a Caido project directory.

    The directory must already contain database.caido and
    database_raw.caido; nothing is created here.
    """
    return SQLiteProjectService(project_dir)


__all__ = [
    "MAIN_DB_FILENAME",
    "RAW_DB_FILENAME",
    "RAW_SCHEMA",
    "Params",
    "ProjectService",
    "Row",
    "SQLiteProjectService",
    "create_service",
]
