"""Shared test fixtures."""

import csv
import sqlite3

import pytest

from caidodb import MAIN_DB_FILENAME, RAW_DB_FILENAME, create_service

# Minimal copy of the Caido project tables touched by an import.
MAIN_DDL = """
CREATE TABLE responses (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    status_code     INTEGER NOT NULL,
    raw_id          INTEGER NOT NULL,
    length          INTEGER NOT NULL,
    alteration      TEXT    NOT NULL,
    edited          INTEGER NOT NULL,
    parent_id       INTEGER REFERENCES responses(id),
    created_at      INTEGER NOT NULL,
    roundtrip_time  INTEGER NOT NULL
);
CREATE TABLE requests_metadata (
    id     INTEGER PRIMARY KEY AUTOINCREMENT,
    color  TEXT,
    notes  TEXT
);
CREATE TABLE requests (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    host         TEXT    NOT NULL,
    method       TEXT    NOT NULL,
    path         TEXT    NOT NULL,
    length       INTEGER NOT NULL,
    port         INTEGER NOT NULL,
    is_tls       INTEGER NOT NULL,
    raw_id       INTEGER NOT NULL,
    query        TEXT    NOT NULL,
    response_id  INTEGER REFERENCES responses(id),
    source       TEXT    NOT NULL,
    alteration   TEXT    NOT NULL,
    edited       INTEGER NOT NULL,
    parent_id    INTEGER REFERENCES requests(id),
    created_at   INTEGER NOT NULL,
    metadata_id  INTEGER NOT NULL REFERENCES requests_metadata(id)
);
CREATE TABLE intercept_entries (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id  INTEGER NOT NULL REFERENCES requests(id)
);
"""

RAW_DDL = """
CREATE TABLE requests_raw (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    data        BLOB NOT NULL,
    source      TEXT NOT NULL,
    alteration  TEXT NOT NULL
);
CREATE TABLE responses_raw (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    data        BLOB NOT NULL,
    source      TEXT NOT NULL,
    alteration  TEXT NOT NULL
);
"""

CSV_HEADER = [
    "id", "host", "method", "path", "length", "port", "raw", "is_tls", "query",
    "file_extensions", "source", "alteration", "edited", "parent_id", "created_at",
    "response_id", "response_status_code", "response_raw", "response_length",
    "response_alteration", "response_edited", "response_parent_id", "response_created_at",
]


def make_row(**overrides: str) -> list[str]:
    """A well-formed 23-field export row for a GET to example.com."""
    fields = {
        "id": "1",
        "host": "example.com",
        "method": "GET",
        "path": "/",
        "length": "37",
        "port": "443",
        "raw": "GET / HTTP/1.1\r\nHost: example.com\r\n\r\n",
        "is_tls": "true",
        "query": "",
        "file_extensions": "",
        "source": "intercept",
        "alteration": "none",
        "edited": "false",
        "parent_id": "",
        "created_at": "1700000000",
        "response_id": "",
        "response_status_code": "200",
        "response_raw": "HTTP/1.1 200 OK\r\nContent-Length: 2\r\n\r\nok",
        "response_length": "40",
        "response_alteration": "none",
        "response_edited": "false",
        "response_parent_id": "",
        "response_created_at": "1700000001",
    }
    fields.update(overrides)
    return [fields[name] for name in CSV_HEADER]


@pytest.fixture
def project_dir(tmp_path):
    """An empty Caido project directory with both databases in place."""
    project = tmp_path / "project"
    project.mkdir()
    for filename, ddl in ((MAIN_DB_FILENAME, MAIN_DDL), (RAW_DB_FILENAME, RAW_DDL)):
        conn = sqlite3.connect(project / filename)
        conn.executescript(ddl)
        conn.close()
    return project


@pytest.fixture
def project_service(project_dir):
    """Provide a connected ProjectService for each test."""
    service = create_service(project_dir)
    service.connect()
    yield service
    service.close()


@pytest.fixture
def write_csv(tmp_path):
    """Write a header plus the given rows and return the file path."""

    def _write(rows: list[list[str]], name: str = "export.csv"):
        csv_file = tmp_path / name
        with open(csv_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            writer.writerows(rows)
        return csv_file

    return _write
