"""Streamlit demo UI for reflection-engine."""

from __future__ import annotations

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from reflection_engine.adapters.loader import load_records
from reflection_engine.config import settings
from reflection_engine.insights import fallback_insights
from reflection_engine.metrics import compute_activity_metrics, is_overdue
from reflection_engine.normalizer import normalize_records
from reflection_engine.schema import NormalizedRecord, SortOption
from reflection_engine.search import search

SEARCH_FIELDS = ["title", "description"]

SORT_OPTIONS = [
    SortOption.for_field("created_at", "desc", "Newest first"),
    SortOption.for_field("created_at", "asc", "Oldest first"),
    SortOption.for_field("deadline", "asc", "Deadline"),
    SortOption.for_field("quarter", "asc", "Quarter"),
    SortOption.for_field("title", "asc", "Title"),
    SortOption.for_field("progress_percent", "desc", "Progress"),
]


def _parse_uploaded(uploaded_file) -> list[dict]:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return load_records(temp_path)


def _row(record: NormalizedRecord) -> dict[str, Any]:
    done = sum(1 for item in record.checklist if item.completed)
    return {
        "title": record.get("title"),
        "quarter": f"{record.get('quarter') or ''} {record.get('year') or ''}".strip(),
        "deadline": record.get("deadline"),
        "progress": f"{record.get('progress_percent') or 0}%",
        "checklist": f"{done}/{len(record.checklist)}",
        "tags": ", ".join(record.tags),
        "collaborators": len(record.collaborators),
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Reflection Engine Demo", layout="wide")
    st.title("Focus Areas")

    with st.sidebar:
        st.header("Data")
        uploaded = st.file_uploader("Upload focus area export", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        match_tags = st.checkbox("Search inside tags", value=False)

    try:
        if uploaded is not None and not use_demo:
            raw = _parse_uploaded(uploaded)
        else:
            raw = load_records(settings.sample_data_path)
    except (OSError, ValueError) as exc:
        st.error(f"Input error: {exc}")
        return

    records = normalize_records(raw)

    query = st.text_input("Search", placeholder="Search focus areas...")
    labels = {option.label: option.value for option in SORT_OPTIONS}
    selected = st.selectbox("Sort by", options=list(labels))
    results = search(records, SEARCH_FIELDS, query, labels[selected], match_string_lists=match_tags)

    analytics = compute_activity_metrics(records, diary_entries=[], assignments=[])
    key_metrics = fallback_insights(analytics)["keyMetrics"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Focus areas", analytics["total_focus_areas"])
    c2.metric("Average progress", f"{analytics['avg_progress']}%")
    c3.metric("Overdue", analytics["overdue_items"])
    c4.metric("Risk level", key_metrics["riskLevel"])

    st.caption(f"Showing {len(results)} of {len(records)} focus areas")
    st.table([_row(record) for record in results])

    now = datetime.now(timezone.utc)
    overdue = [record.get("title") for record in results if is_overdue(record, now)]
    if overdue:
        st.warning("Overdue: " + ", ".join(str(title) for title in overdue))


if __name__ == "__main__":
    main()
