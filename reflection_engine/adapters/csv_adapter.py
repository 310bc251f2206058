"""CSV adapter for exported record tables."""

from __future__ import annotations

import csv
import logging

from reflection_engine.config import settings

logger = logging.getLogger(__name__)


def _parse_row(row: dict, row_number: int) -> dict:
    if None in row:
        raise ValueError(f"Row {row_number}: more cells than header columns")

    record = {}
    for column, cell in row.items():
        value = cell if cell not in (None, "") else None
        if value is not None and column in settings.numeric_fields:
            try:
                value = int(value)
            except ValueError:
                logger.warning(f"Row {row_number}: kept non-integer {column} '{value}' as text")
        record[column] = value
    return record


def parse(file_path: str) -> list[dict]:
    """Parse a CSV export into raw records.

    Nested columns stay JSON strings; the normalizer decodes them.
    """

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records = [_parse_row(row, row_number) for row_number, row in enumerate(reader, start=2)]

    logger.info(f"Loaded {len(records)} records from {file_path}")
    return records
