"""Decision analytics over a look-back period.

Counts, frequencies and success rates computed by the store for the
analytics dashboard. Rates are whole-number percentages of the decisions
whose outcome is known.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from decision_log.models.enums import AnalyticsPeriod

PERIOD_DAYS: dict[AnalyticsPeriod, int] = {
    AnalyticsPeriod.WEEK: 7,
    AnalyticsPeriod.MONTH: 30,
    AnalyticsPeriod.QUARTER: 90,
}


def period_start(period: AnalyticsPeriod, now: datetime) -> datetime | None:
    """Earliest created_at included in the period, or None for all time."""
    days = PERIOD_DAYS.get(period)
    if days is None:
        return None
    return now - timedelta(days=days)


def success_rate(successful: int, with_outcomes: int) -> int:
    if with_outcomes == 0:
        return 0
    return round(successful * 100 / with_outcomes)


class AnalyticsSummary(BaseModel):
    """Aggregated view of the decisions created in a period."""

    total_decisions: int = 0
    decisions_by_category: dict[str, int] = Field(default_factory=dict)
    success_rate_by_category: dict[str, int] = Field(
        default_factory=dict,
        description="Only categories with at least one recorded outcome",
    )
    optimized_for_frequency: dict[str, int] = Field(default_factory=dict)
    tradeoffs_accepted_frequency: dict[str, int] = Field(default_factory=dict)
    tradeoffs_rejected_frequency: dict[str, int] = Field(default_factory=dict)
    average_confidence: float = Field(default=0.0, description="Rounded to one decimal")
    decisions_with_outcomes: int = 0
    overall_success_rate: int = 0
    flagged_for_review_count: int = 0
    decisions_past_review_date: int = 0
