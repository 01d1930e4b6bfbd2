"""Facet metadata for decision listings.

Gathers the distinct categories, projects and tags, the confidence range
and the outcome counts across every stored decision.
"""

import asyncio
from typing import Protocol, runtime_checkable

import structlog

from decision_log.search.schemas import ConfidenceRange, OutcomeStats, SearchMetadata

logger = structlog.get_logger()


@runtime_checkable
class FacetStore(Protocol):
    """Read-side facet queries over all stored decisions.

    DecisionRepository implements this protocol structurally; tests
    substitute an AsyncMock.
    """

    async def distinct_categories(self) -> list[str]:
        """Return the distinct category values in use, sorted."""
        ...

    async def distinct_projects(self) -> list[str]:
        """Return the distinct non-null project names, sorted."""
        ...

    async def distinct_tags(self) -> list[str]:
        """Return every tag in use, flattened, deduplicated and sorted."""
        ...

    async def confidence_range(self) -> ConfidenceRange | None:
        """Return the min/max confidence level, or None when no decision has one."""
        ...

    async def outcome_stats(self) -> OutcomeStats:
        """Return decision counts by outcome state."""
        ...


class MetadataAggregator:
    """Computes facet metadata with concurrent store queries.

    The five queries are independent reads; they run concurrently and
    are joined before the response is built. Any single failure fails the
    whole call, so callers never see partial metadata.
    """

    def __init__(self, store: FacetStore):
        """Initialize aggregator with a store.

        Args:
            store: Source of facet queries
        """
        self._store = store

    async def gather(self) -> SearchMetadata:
        """Gather all facets.

        Returns:
            SearchMetadata; empty lists and no confidence range for an
            empty store

        Raises:
            StoreError: If any facet query fails
        """
        categories, projects, tags, confidence, outcomes = await asyncio.gather(
            self._store.distinct_categories(),
            self._store.distinct_projects(),
            self._store.distinct_tags(),
            self._store.confidence_range(),
            self._store.outcome_stats(),
        )

        logger.debug(
            "search metadata gathered",
            categories=len(categories),
            projects=len(projects),
            tags=len(tags),
            total=outcomes.total,
        )

        return SearchMetadata(
            available_categories=categories,
            available_projects=projects,
            available_tags=tags,
            confidence_range=confidence,
            outcome_stats=outcomes,
        )
