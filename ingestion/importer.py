"""Row-at-a-time import of exported CSV traffic into a Caido project."""

import csv
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from caidodb import ProjectService, create_service
from ingestion.record import BYTES_ENCODING, BYTES_ERRORS, ImportRecord, parse_record
from ingestion.schema import (
    INTERCEPT_COLUMNS,
    INTERCEPT_ENTRIES_TABLE,
    RAW_COLUMNS,
    REQUEST_COLUMNS,
    REQUESTS_METADATA_TABLE,
    REQUESTS_RAW_TABLE,
    REQUESTS_TABLE,
    RESPONSE_COLUMNS,
    RESPONSES_RAW_TABLE,
    RESPONSES_TABLE,
)

logger = logging.getLogger(__name__)

# Raw bodies can exceed the csv module default field size.
CSV_FIELD_SIZE_LIMIT = 2**31 - 1


class InsertError(Exception):
    """An insert into one of the target tables failed."""

    def __init__(self, table: str, cause: Exception):
        super().__init__(f"failed to insert into {table}: {cause}")
        self.table = table
        self.cause = cause


@dataclass(frozen=True)
class ImportedIds:
    response_raw_id: int
    response_id: int
    request_raw_id: int
    metadata_id: int
    request_id: int
    intercept_id: int


@dataclass
class ImportStats:
    rows_read: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0


class RecordImporter:
    """Writes one ImportRecord as a request/response pair.

    Inserts run in a fixed order because every row references identifiers
    generated by the ones before it:

        raw.responses_raw -> responses -> raw.requests_raw
        -> requests_metadata -> requests -> intercept_entries
    """

    def __init__(self, service: ProjectService):
        self._service = service

    def import_record(self, record: ImportRecord) -> ImportedIds:
        response_raw_id, response_id = self._insert_response(record)
        request_raw_id, metadata_id, request_id = self._insert_request(record, response_id)
        intercept_id = self._insert_intercept(request_id)
        return ImportedIds(
            response_raw_id=response_raw_id,
            response_id=response_id,
            request_raw_id=request_raw_id,
            metadata_id=metadata_id,
            request_id=request_id,
            intercept_id=intercept_id,
        )

    def _insert(self, table: str, columns: list[str], row: tuple) -> int:
        try:
            return self._service.insert(table, columns, row)
        except (sqlite3.Error, ValueError) as e:
            raise InsertError(table, e) from e

    def _insert_response(self, record: ImportRecord) -> tuple[int, int]:
        raw_id = self._insert(
            RESPONSES_RAW_TABLE,
            RAW_COLUMNS,
            (record.response_raw, record.source, record.response_alteration),
        )
        # roundtrip_time is not part of the export
        response_id = self._insert(
            RESPONSES_TABLE,
            RESPONSE_COLUMNS,
            (
                record.response_status_code,
                raw_id,
                record.response_length,
                record.response_alteration,
                record.response_edited,
                record.response_parent_id,
                record.response_created_at,
                0,
            ),
        )
        return raw_id, response_id

    def _insert_request(self, record: ImportRecord, response_id: int) -> tuple[int, int, int]:
        raw_id = self._insert(
            REQUESTS_RAW_TABLE,
            RAW_COLUMNS,
            (record.raw, record.source, record.alteration),
        )
        try:
            metadata_id = self._service.insert_default(REQUESTS_METADATA_TABLE)
        except sqlite3.Error as e:
            raise InsertError(REQUESTS_METADATA_TABLE, e) from e

        request_id = self._insert(
            REQUESTS_TABLE,
            REQUEST_COLUMNS,
            (
                record.host,
                record.method,
                record.path,
                record.length,
                record.port,
                record.is_tls,
                raw_id,
                record.query,
                response_id,
                record.source,
                record.alteration,
                record.edited,
                record.parent_id,
                record.created_at,
                metadata_id,
            ),
        )
        return raw_id, metadata_id, request_id

    def _insert_intercept(self, request_id: int) -> int:
        return self._insert(INTERCEPT_ENTRIES_TABLE, INTERCEPT_COLUMNS, (request_id,))


def read_rows(file_path: str | Path, stats: ImportStats):
    """Yield (row_num, record) for every parseable data row of a CSV file.

    Opening the file and reading its header are fatal; unreadable or
    malformed data rows are logged, counted in stats and skipped.
    """
    csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    with open(file_path, newline="", encoding=BYTES_ENCODING, errors=BYTES_ERRORS) as f:
        reader = csv.reader(f)
        try:
            next(reader)  # skip header
        except StopIteration:
            raise ValueError(f"CSV file {file_path} has no header row") from None

        row_num = 1
        while True:
            row_num += 1
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                stats.skipped += 1
                logger.warning("Skipping unreadable row %d: %s", row_num, e)
                continue

            if not row:
                continue
            stats.rows_read += 1
            try:
                record = parse_record(row)
            except ValueError as e:
                stats.skipped += 1
                logger.warning("Skipping malformed row %d: %s", row_num, e)
                continue
            yield row_num, record


def import_csv(
    service: ProjectService,
    file_path: str | Path,
    atomic: bool = False,
) -> ImportStats:
    """Import every record of a CSV export through a connected service.

    By default each insert commits on its own, so a record whose later
    stage fails leaves its earlier rows in the project. With atomic=True
    each record is wrapped in a transaction and rolled back as a whole.
    Either way the run moves on to the next record.
    """
    importer = RecordImporter(service)
    stats = ImportStats()

    for row_num, record in read_rows(file_path, stats):
        try:
            if atomic:
                with service.transaction():
                    importer.import_record(record)
            else:
                importer.import_record(record)
        except (InsertError, sqlite3.Error) as e:
            stats.failed += 1
            logger.error("Error inserting data for host %s (row %d): %s", record.host, row_num, e)
            continue
        stats.imported += 1
        logger.info("Successfully inserted request for host: %s", record.host)

    logger.info(
        "Import finished: %d rows read, %d imported, %d skipped, %d failed",
        stats.rows_read,
        stats.imported,
        stats.skipped,
        stats.failed,
    )
    return stats


def import_project_csv(
    project_dir: str | Path,
    file_path: str | Path,
    atomic: bool = False,
) -> ImportStats:
    """Import a CSV export into the Caido project at project_dir."""
    service = create_service(project_dir)
    service.connect()
    try:
        return import_csv(service, file_path, atomic=atomic)
    finally:
        service.close()
