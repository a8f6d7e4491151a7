"""CSV loading — header resolution and named-field records."""

import csv
import logging
from typing import Iterable

from timeline_tracing.errors import CsvFormatError, MissingFieldError

logger = logging.getLogger(__name__)

Record = dict[str, str]


def read_rows(filepath: str) -> list[list[str]]:
    """Read every row of a CSV file, header included. Blank lines are skipped.

    Raises CsvFormatError if the file cannot be opened, decoded or parsed, or
    if a row's field count differs from the header's.
    """
    numbered = []
    try:
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f, strict=True)
            for row in reader:
                if row:
                    numbered.append((reader.line_num, row))
    except UnicodeDecodeError as e:
        raise CsvFormatError(f"Failed to read as CSV the file {filepath}: {e}") from e
    except OSError as e:
        raise CsvFormatError(f"Failed to read the file {filepath}: {e}") from e
    except csv.Error as e:
        raise CsvFormatError(f"Failed to read as CSV the file {filepath}: {e}") from e

    if not numbered:
        raise CsvFormatError(f"CSV file {filepath} is empty, a header row is required")

    width = len(numbered[0][1])
    for line_num, row in numbered[1:]:
        if len(row) != width:
            raise CsvFormatError(
                f"Failed to read as CSV the file {filepath}: line {line_num} has "
                f"{len(row)} fields, header has {width}"
            )
    return [row for _, row in numbered]


def make_header(header_row: list[str], required: Iterable[str]) -> dict[str, int]:
    """Map column names to indexes, verifying the required names are present."""
    header = {name: index for index, name in enumerate(header_row)}
    for name in required:
        if name not in header:
            raise MissingFieldError(f"Field {name!r} not found in header {header_row}")
    return header


def to_records(rows: list[list[str]], required: Iterable[str]) -> list[Record]:
    """Turn header + data rows into one dict per data row."""
    header = make_header(rows[0], required)
    return [
        {name: row[index] for name, index in header.items()}
        for row in rows[1:]
    ]


def read_records(filepath: str, required: Iterable[str]) -> list[Record]:
    """Load *filepath* and return its data rows as named-field records."""
    required = tuple(required)
    records = to_records(read_rows(filepath), required)
    logger.info("Loaded %d rows from %s", len(records), filepath)
    return records
