"""Tests for MetadataAggregator."""

from unittest.mock import AsyncMock

import pytest

from decision_log.errors import StoreError
from decision_log.search.metadata import MetadataAggregator
from decision_log.search.schemas import ConfidenceRange, OutcomeStats


@pytest.fixture
def store() -> AsyncMock:
    """Store double returning fixed facets."""
    mock = AsyncMock()
    mock.distinct_categories.return_value = ["architecture", "process"]
    mock.distinct_projects.return_value = ["Billing"]
    mock.distinct_tags.return_value = ["api", "db"]
    mock.confidence_range.return_value = ConfidenceRange(min=3, max=9)
    mock.outcome_stats.return_value = OutcomeStats(total=4, pending=2, success=1, failed=1)
    return mock


class TestMetadataAggregator:
    """Tests for facet gathering."""

    @pytest.mark.asyncio
    async def test_gathers_all_facets(self, store: AsyncMock):
        metadata = await MetadataAggregator(store).gather()

        assert metadata.available_categories == ["architecture", "process"]
        assert metadata.available_projects == ["Billing"]
        assert metadata.available_tags == ["api", "db"]
        assert metadata.confidence_range == ConfidenceRange(min=3, max=9)
        assert metadata.outcome_stats.pending == 2
        store.distinct_tags.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_one_failure_fails_whole_call(self, store: AsyncMock):
        store.distinct_tags.side_effect = StoreError("disk I/O error")

        with pytest.raises(StoreError):
            await MetadataAggregator(store).gather()

    @pytest.mark.asyncio
    async def test_camel_case_serialization(self, store: AsyncMock):
        metadata = await MetadataAggregator(store).gather()
        dumped = metadata.model_dump(by_alias=True)

        assert set(dumped) == {
            "availableCategories",
            "availableProjects",
            "availableTags",
            "confidenceRange",
            "outcomeStats",
        }

    @pytest.mark.asyncio
    async def test_empty_store(self, repo):
        metadata = await MetadataAggregator(repo).gather()

        assert metadata.available_categories == []
        assert metadata.available_projects == []
        assert metadata.available_tags == []
        assert metadata.confidence_range is None
        assert metadata.outcome_stats == OutcomeStats()
