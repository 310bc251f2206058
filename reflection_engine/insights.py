"""Structured AI insights: parse the model reply or fall back to analytics."""

from __future__ import annotations

import json
import logging

from reflection_engine.metrics import completion_rate, risk_level

logger = logging.getLogger(__name__)

# Key names the stored insight payload uses for its analytics block
ANALYTICS_KEYS = {
    "total_focus_areas": "totalFocusAreas",
    "completed_focus_areas": "completedFocusAreas",
    "avg_progress": "avgProgress",
    "recent_diary_entries": "recentDiaryEntries",
    "submitted_questionnaires": "submittedQuestionnaires",
    "total_questionnaires": "totalQuestionnaires",
    "overdue_items": "overdueItems",
}


def fallback_insights(analytics: dict) -> dict:
    """Build insights from analytics alone when the model reply is unusable."""

    overdue = analytics.get("overdue_items", 0)
    return {
        "summary": "AI insights generated successfully",
        "keyMetrics": {
            "progressScore": analytics.get("avg_progress", 0),
            "completionRate": completion_rate(analytics),
            "riskLevel": risk_level(overdue),
        },
        "strengths": ["Consistent engagement with platform", "Active diary entries"],
        "concerns": ["Overdue items need attention"] if overdue else ["No major concerns identified"],
        "blockers": ["Approaching deadlines"] if overdue else [],
        "recommendations": [
            {
                "priority": "HIGH",
                "action": "Review and update progress on focus areas",
                "timeline": "This week",
                "category": "GOAL_SETTING",
            }
        ],
        "monthlyTrend": {"direction": "STABLE", "insight": "Steady progress observed"},
        "nextSteps": ["Review focus areas", "Update progress", "Plan next quarter"],
    }


def parse_insights(raw_text: str, analytics: dict) -> dict:
    """Decode the model's JSON reply and attach the analytics it was built from."""

    try:
        insights = json.loads(raw_text)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning(f"AI reply is not valid JSON, using analytics fallback: {exc}")
        insights = fallback_insights(analytics)
    else:
        if not isinstance(insights, dict):
            logger.warning(f"AI reply is a {type(insights).__name__}, not an object; using analytics fallback")
            insights = fallback_insights(analytics)

    insights["analytics"] = {ANALYTICS_KEYS.get(key, key): value for key, value in analytics.items()}
    return insights
