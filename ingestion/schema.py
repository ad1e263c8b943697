"""Target tables of a Caido project.

The tables are owned by Caido; this module only names them and the
columns an import writes.
"""

from caidodb import RAW_SCHEMA

RESPONSES_RAW_TABLE = f"{RAW_SCHEMA}.responses_raw"
REQUESTS_RAW_TABLE = f"{RAW_SCHEMA}.requests_raw"
RESPONSES_TABLE = "responses"
REQUESTS_METADATA_TABLE = "requests_metadata"
REQUESTS_TABLE = "requests"
INTERCEPT_ENTRIES_TABLE = "intercept_entries"

RAW_COLUMNS = ["data", "source", "alteration"]

RESPONSE_COLUMNS = [
    "status_code",
    "raw_id",
    "length",
    "alteration",
    "edited",
    "parent_id",
    "created_at",
    "roundtrip_time",
]

REQUEST_COLUMNS = [
    "host",
    "method",
    "path",
    "length",
    "port",
    "is_tls",
    "raw_id",
    "query",
    "response_id",
    "source",
    "alteration",
    "edited",
    "parent_id",
    "created_at",
    "metadata_id",
]

INTERCEPT_COLUMNS = ["request_id"]
