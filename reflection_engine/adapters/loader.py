"""Pick an adapter by file extension."""

from __future__ import annotations

from pathlib import Path

from reflection_engine.adapters import csv_adapter, json_adapter


def load_records(path) -> list[dict]:
    """Load raw records from a ``.csv`` or ``.json`` export."""

    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")
