"""Import of exported HTTP traffic CSVs into Caido projects."""

from ingestion.importer import (
    ImportedIds,
    ImportStats,
    InsertError,
    RecordImporter,
    import_csv,
    import_project_csv,
)
from ingestion.record import FIELD_COUNT, ImportRecord, parse_record

__all__ = [
    "FIELD_COUNT",
    "ImportRecord",
    "ImportStats",
    "ImportedIds",
    "InsertError",
    "RecordImporter",
    "import_csv",
    "import_project_csv",
    "parse_record",
]
