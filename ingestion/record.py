"""Parsing of exported CSV rows into typed import records.

An unreadable boolean or integer becomes its zero value and an
unreadable nullable integer becomes None; only the field count is
checked strictly.
"""

import re
from dataclasses import dataclass

FIELD_COUNT = 23
BYTES_ENCODING = "utf-8"
BYTES_ERRORS = "surrogateescape"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ImportRecord:
    """One exported request together with the response it produced."""

    id: int
    host: str
    method: str
    path: str
    length: int
    port: int
    raw: bytes
    is_tls: bool
    query: str
    file_extensions: str
    source: str
    alteration: str
    edited: bool
    parent_id: int | None
    created_at: int
    response_id: int | None
    response_status_code: int
    response_raw: bytes
    response_length: int
    response_alteration: str
    response_edited: bool
    response_parent_id: int | None
    response_created_at: int


def parse_bool(value: str) -> bool:
    """True for the usual true spellings, False for anything else."""
    return value in _TRUE_TOKENS


def _parse_int64(value: str) -> int | None:
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


def parse_int(value: str) -> int:
    """Parse a base-10 integer, 0 if unreadable, clamped to 64 bits."""
    parsed = _parse_int64(value)
    if parsed is None:
        return 0
    return max(INT64_MIN, min(INT64_MAX, parsed))


def parse_nullable_int(value: str) -> int | None:
    """Parse a base-10 integer, None if empty, unreadable or out of range."""
    parsed = _parse_int64(value)
    if parsed is None or not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def parse_bytes(value: str) -> bytes:
    return value.encode(BYTES_ENCODING, BYTES_ERRORS)


def parse_text(value: str) -> str:
    """Undecodable bytes in a text field become U+FFFD."""
    return parse_bytes(value).decode(BYTES_ENCODING, "replace")


def parse_record(row: list[str]) -> ImportRecord:
    """Map the 23 positional CSV fields onto an ImportRecord.

    Raises ValueError if the row does not have exactly FIELD_COUNT fields.
    """
    if len(row) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, got {len(row)}")

    return ImportRecord(
        id=parse_int(row[0]),
        host=parse_text(row[1]),
        method=parse_text(row[2]),
        path=parse_text(row[3]),
        length=parse_int(row[4]),
        port=parse_int(row[5]),
        raw=parse_bytes(row[6]),
        is_tls=parse_bool(row[7]),
        query=parse_text(row[8]),
        file_extensions=parse_text(row[9]),
        source=parse_text(row[10]),
        alteration=parse_text(row[11]),
        edited=parse_bool(row[12]),
        parent_id=parse_nullable_int(row[13]),
        created_at=parse_int(row[14]),
        response_id=parse_nullable_int(row[15]),
        response_status_code=parse_int(row[16]),
        response_raw=parse_bytes(row[17]),
        response_length=parse_int(row[18]),
        response_alteration=parse_text(row[19]),
        response_edited=parse_bool(row[20]),
        response_parent_id=parse_nullable_int(row[21]),
        response_created_at=parse_int(row[22]),
    )
