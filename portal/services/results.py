"""Shaping candidate results for the admin views."""
from __future__ import annotations

from portal.utils.time_utils import format_timestamp


def score_band(score: float) -> str:
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


def status_text(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Average"
    return "Poor"


def summarize_results(rows: list[dict[str, object]]) -> list[dict[str, object]]:
    """Add display fields to the result list rows."""
    summary = []
    for row in rows:
        item = dict(row)
        item["created_at_formatted"] = format_timestamp(row.get("created_at"))
        percentage = row.get("score_percentage")
        if isinstance(percentage, (int, float)):
            item["score_band"] = score_band(percentage)
        summary.append(item)
    return summary


def result_detail_view(data: dict[str, object]) -> dict[str, object]:
    """Group a result's responses by category and grade the score."""
    candidate = dict(data.get("candidate") or {})
    responses = data.get("responses") or []

    grouped: dict[str, list[dict[str, object]]] = {}
    for response in responses:
        grouped.setdefault(str(response.get("category_name") or ""), []).append(response)

    score = candidate.get("score")
    if isinstance(score, (int, float)):
        candidate["score_band"] = score_band(score)
        candidate["status_text"] = status_text(score)
    candidate["created_at_formatted"] = format_timestamp(
        candidate.get("created_at"), with_month_name=True
    )

    correct = sum(1 for response in responses if response.get("is_correct"))
    return {
        "candidate": candidate,
        "responses_by_category": grouped,
        "correct_count": correct,
        "incorrect_count": len(responses) - correct,
    }
