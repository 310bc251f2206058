import json
import logging
from datetime import datetime, timezone

from reflection_engine.insights import parse_insights
from reflection_engine.metrics import compute_activity_metrics, current_quarter, is_overdue, risk_level
from reflection_engine.normalizer import normalize_records

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def sample_areas():
    return normalize_records(
        [
            {"id": "a", "progress_percent": 100, "deadline": "2025-01-01"},
            {"id": "b", "progress_percent": 40, "deadline": "2025-05-01"},
            {"id": "c", "progress_percent": 20, "deadline": "2025-12-01"},
            {"id": "d", "progress_percent": 0, "deadline": None},
        ]
    )


def sample_metrics():
    assignments = [{"submitted_at": "2025-05-20T10:00:00+00:00"}, {"submitted_at": None}]
    return compute_activity_metrics(sample_areas(), [{}, {}, {}], assignments, now=NOW)


def test_compute_activity_metrics():
    assert sample_metrics() == {
        "total_focus_areas": 4,
        "completed_focus_areas": 1,
        "avg_progress": 40,
        "recent_diary_entries": 3,
        "submitted_questionnaires": 1,
        "total_questionnaires": 2,
        "overdue_items": 1,
    }


def test_compute_activity_metrics_empty():
    metrics = compute_activity_metrics([], [], [], now=NOW)
    assert metrics["avg_progress"] == 0
    assert metrics["overdue_items"] == 0


def test_risk_level():
    assert risk_level(0) == "LOW"
    assert risk_level(1) == "MEDIUM"
    assert risk_level(2) == "MEDIUM"
    assert risk_level(3) == "HIGH"


def test_current_quarter():
    assert current_quarter(datetime(2025, 11, 3)) == ("Q4", 2025)
    assert current_quarter(datetime(2025, 1, 1)) == ("Q1", 2025)


def test_parse_insights_keeps_model_reply():
    analytics = sample_metrics()
    reply = json.dumps({"summary": "Steady quarter", "strengths": ["Focus"]})
    insights = parse_insights(reply, analytics)
    assert insights["summary"] == "Steady quarter"
    assert insights["analytics"]["totalFocusAreas"] == 4


def test_parse_insights_falls_back_on_bad_reply(caplog):
    caplog.set_level(logging.WARNING)
    analytics = sample_metrics()
    for reply in ("```json {", "[1, 2]"):
        insights = parse_insights(reply, analytics)
        assert insights["keyMetrics"] == {"progressScore": 40, "completionRate": 25, "riskLevel": "MEDIUM"}
        assert insights["blockers"] == ["Approaching deadlines"]
        assert insights["analytics"]["overdueItems"] == 1
    assert len(caplog.records) == 2


def test_insight_analytics_use_stored_key_names():
    insights = parse_insights("not json", compute_activity_metrics([], [], [], now=NOW))
    assert sorted(insights["analytics"]) == [
        "avgProgress",
        "completedFocusAreas",
        "overdueItems",
        "recentDiaryEntries",
        "submittedQuestionnaires",
        "totalFocusAreas",
        "totalQuestionnaires",
    ]


def test_is_overdue_accepts_naive_now():
    overdue, upcoming = sample_areas()[1], sample_areas()[2]
    assert is_overdue(overdue, datetime(2025, 6, 1))
    assert not is_overdue(upcoming, datetime(2025, 6, 1))
