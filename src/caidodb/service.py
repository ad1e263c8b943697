"""Abstract ProjectService interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from caidodb.types import Params, Row


class ProjectService(ABC):
    """Interface to a Caido project's datastore.

    A project is a main database with a second "raw" database attached to
    the same connection. One service owns exactly one connection for the
    whole run; it is acquired by connect() and released by close().
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the main database and attach the raw database."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def insert(self, table: str, columns: list[str], row: tuple) -> int:
        """Insert one row and return its generated identifier."""

    @abstractmethod
    def insert_default(self, table: str) -> int:
        """Insert a row made only of column defaults and return its identifier."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: commits on success, rolls back on error."""

    def __enter__(self) -> "ProjectService":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
