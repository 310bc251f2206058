"""JSON adapter for exported record tables."""

from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)


def parse(file_path: str) -> list[dict]:
    """Parse a JSON export (a list of row objects) into raw records."""

    with open(file_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except ValueError as exc:
            raise ValueError(f"{file_path}: malformed JSON") from exc

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Item {index}: expected an object, got {type(item).__name__}")

    logger.info(f"Loaded {len(payload)} records from {file_path}")
    return payload
