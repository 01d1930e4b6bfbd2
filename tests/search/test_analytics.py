"""Tests for analytics period windows and rates."""

from datetime import UTC, datetime, timedelta

from decision_log.models.enums import AnalyticsPeriod
from decision_log.search.analytics import AnalyticsSummary, period_start, success_rate

NOW = datetime(2025, 6, 1, 12, tzinfo=UTC)


class TestPeriodStart:
    def test_bounded_periods(self):
        assert period_start(AnalyticsPeriod.WEEK, NOW) == NOW - timedelta(days=7)
        assert period_start(AnalyticsPeriod.MONTH, NOW) == NOW - timedelta(days=30)
        assert period_start(AnalyticsPeriod.QUARTER, NOW) == NOW - timedelta(days=90)

    def test_all_time_is_unbounded(self):
        assert period_start(AnalyticsPeriod.ALL, NOW) is None


class TestSuccessRate:
    def test_whole_percentage(self):
        assert success_rate(2, 3) == 67
        assert success_rate(1, 2) == 50

    def test_no_outcomes(self):
        assert success_rate(0, 0) == 0


def test_empty_summary_defaults():
    summary = AnalyticsSummary()
    assert summary.total_decisions == 0
    assert summary.average_confidence == 0.0
    assert summary.success_rate_by_category == {}
