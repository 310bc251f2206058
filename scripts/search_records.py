"""Search and sort a CSV/JSON export of focus areas or diary entries."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reflection_engine.adapters.loader import load_records
from reflection_engine.config import settings
from reflection_engine.normalizer import encode_record, normalize_records
from reflection_engine.search import search


def main() -> None:
    parser = argparse.ArgumentParser(description="Search and sort exported reflection records")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON export")
    parser.add_argument("--query", default="", help="Case-insensitive substring to search for")
    parser.add_argument(
        "--fields",
        default="title,description",
        help="Comma-separated fields to search (dotted paths allowed)",
    )
    parser.add_argument("--sort", default="created_at-desc", help="Sort directive, e.g. quarter-asc")
    parser.add_argument("--match-tags", action="store_true", help="Also match inside lists of strings")
    parser.add_argument("--stored", action="store_true", help="Print records in their stored encoding")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    records = normalize_records(load_records(Path(args.data)))
    fields = [name.strip() for name in args.fields.split(",") if name.strip()]
    results = search(records, fields, args.query, args.sort, match_string_lists=args.match_tags)

    if args.stored:
        payload = [encode_record(record) for record in results]
    else:
        payload = [asdict(record) for record in results]
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":
    main()
