"""Demo script for reflection-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reflection_engine.adapters.json_adapter import parse
from reflection_engine.config import settings
from reflection_engine.insights import parse_insights
from reflection_engine.metrics import compute_activity_metrics
from reflection_engine.normalizer import normalize_records
from reflection_engine.search import SearchView


def main() -> None:
    areas = normalize_records(parse(settings.sample_data_path))
    view = SearchView(areas, ["title", "description"], sort_field="quarter", sort_order="asc")
    for area in view.results:
        print(f"{area.get('quarter')} {area.get('title')}: {area.get('progress_percent')}%")

    view.set_query("retro")
    print("Matching 'retro':", [area.get("title") for area in view.results])

    analytics = compute_activity_metrics(areas, diary_entries=[], assignments=[])
    print("Insights:", parse_insights("not json", analytics)["keyMetrics"])


if __name__ == "__main__":
    main()
