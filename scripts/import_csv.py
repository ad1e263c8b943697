"""CLI entry point for importing exported traffic into a Caido project.

Usage:
    python -m scripts.import_csv -p /path/to/caido/project -f export.csv [--atomic]

The project path falls back to $CAIDO_PROJECT_PATH when -p is omitted.
"""

import argparse
import csv
import logging
import os
import sqlite3
import sys
import time

from ingestion.importer import import_project_csv

PROJECT_PATH_ENV = "CAIDO_PROJECT_PATH"

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import exported HTTP traffic into a Caido project")
    parser.add_argument(
        "-p",
        "--project",
        default=os.environ.get(PROJECT_PATH_ENV),
        help=f"Path to the Caido project directory (default: ${PROJECT_PATH_ENV})",
    )
    parser.add_argument("-f", "--file", required=True, help="Path to the CSV file to import")
    parser.add_argument(
        "--atomic",
        action="store_true",
        help="Roll back every row of a record when any of its inserts fails",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.project:
        logger.error("A project path is required: pass -p or set %s.", PROJECT_PATH_ENV)
        sys.exit(1)

    logger.info("Starting import from %s", args.file)
    start = time.monotonic()
    try:
        stats = import_project_csv(args.project, args.file, atomic=args.atomic)
    except (OSError, sqlite3.Error, csv.Error, ValueError) as e:
        logger.error("Failed to import data: %s", e)
        sys.exit(1)

    logger.info(
        "Import completed in %.2fs (%d imported, %d skipped, %d failed).",
        time.monotonic() - start,
        stats.imported,
        stats.skipped,
        stats.failed,
    )


if __name__ == "__main__":
    main()
