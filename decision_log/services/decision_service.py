"""Decision service orchestrating validation, persistence and search.

Provides a single entry point for every decision operation exposed over
HTTP: create, read, partial update, outcome recording, flag-for-review,
similar-decision linking, delete, listing with facets, project names,
the analytics summary and the bulk reindex sweep.
"""

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import ValidationError

from decision_log.errors import (
    BadRequestError,
    FieldError,
    NotFoundError,
    RequestValidationFailed,
)
from decision_log.models.decision import PROTECTED_FIELDS, Decision, SimilarityNote
from decision_log.models.enums import AnalyticsPeriod, DecisionCategory, enum_values
from decision_log.repositories.decision_repo import DecisionRepository
from decision_log.search.analytics import AnalyticsSummary, period_start
from decision_log.search.filters import SearchLimits, validate_search_filters
from decision_log.search.index import SEARCH_INDEX_COLUMNS
from decision_log.search.metadata import MetadataAggregator
from decision_log.search.planner import build_query_plan
from decision_log.search.schemas import DecisionListResponse, ReindexReport
from decision_log.search.summary import summarize_filters
from decision_log.validation.decisions import (
    UPDATABLE_FIELDS,
    ValidationResult,
    validate_create_decision,
    validate_flag_for_review,
    validate_outcome_update,
    validate_similar_link,
    validate_update_decision,
)
from decision_log.validation.fields import UUID_PATTERN

logger = structlog.get_logger()

# Index columns are store-owned as well
WRITE_PROTECTED_FIELDS = PROTECTED_FIELDS | frozenset(SEARCH_INDEX_COLUMNS)


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.valid:
        raise RequestValidationFailed(result.errors)


def _check_id(decision_id: str) -> str:
    """Reject path ids that are not UUIDs before touching the store."""
    if not UUID_PATTERN.match(decision_id):
        raise BadRequestError("Invalid decision ID format (must be a valid UUID)")
    return decision_id.lower()


def _build_decision(data: Mapping[str, Any]) -> Decision:
    """Build a Decision, reporting model errors as field errors."""
    try:
        return Decision.model_validate(dict(data))
    except ValidationError as e:
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "body",
                message=error["msg"],
            )
            for error in e.errors()
        ]
        raise RequestValidationFailed(errors) from e


class DecisionService:
    """Orchestrates decision writes and searches.

    Every write path validates the full request first, then persists the
    post-write decision through the repository, which recomputes the
    search index in the same statement.
    """

    def __init__(
        self,
        repository: DecisionRepository,
        aggregator: MetadataAggregator,
        limits: SearchLimits | None = None,
    ):
        """Initialize the decision service.

        Args:
            repository: Decision store
            aggregator: Facet metadata aggregator
            limits: Filter bounds, defaults to application settings
        """
        self._repo = repository
        self._aggregator = aggregator
        self._limits = limits or SearchLimits.from_settings()

    async def create_decision(self, data: Mapping[str, Any]) -> Decision:
        """Validate and persist a new decision.

        Args:
            data: Raw request body

        Returns:
            The created Decision

        Raises:
            RequestValidationFailed: With every field error found
        """
        _raise_if_invalid(validate_create_decision(data))

        decision = _build_decision({k: v for k, v in data.items() if k in UPDATABLE_FIELDS})
        await self._repo.create(decision)

        logger.info(
            "decision created",
            decision_id=str(decision.id),
            category=decision.category.value,
        )
        return decision

    async def get_decision(self, decision_id: str) -> Decision:
        """Fetch a decision or raise NotFoundError."""
        decision = await self._repo.get(_check_id(decision_id))
        if decision is None:
            raise NotFoundError("Decision", decision_id)
        return decision

    async def update_decision(self, decision_id: str, data: Mapping[str, Any]) -> Decision:
        """Apply a partial update.

        Only the supplied fields change; each one is validated on its own.
        The search index is recomputed whatever field changed.

        Raises:
            BadRequestError: If the body names a protected field
            RequestValidationFailed: If any supplied field is invalid
            NotFoundError: If the decision does not exist
        """
        _check_id(decision_id)
        protected = sorted(WRITE_PROTECTED_FIELDS.intersection(data))
        if protected:
            raise BadRequestError(f"Cannot update protected fields: {', '.join(protected)}")

        _raise_if_invalid(validate_update_decision(data))

        existing = await self.get_decision(decision_id)
        changes = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        updated = await self._save(existing, changes)

        logger.info(
            "decision updated",
            decision_id=decision_id,
            fields=sorted(changes),
        )
        return updated

    async def record_outcome(self, decision_id: str, data: Mapping[str, Any]) -> Decision:
        """Record the outcome of a decision.

        outcome_date defaults to now when not supplied.
        """
        _check_id(decision_id)
        _raise_if_invalid(validate_outcome_update(data))

        existing = await self.get_decision(decision_id)
        changes: dict[str, Any] = {
            "outcome": data["outcome"],
            "outcome_success": data["outcome_success"],
            "outcome_date": data.get("outcome_date") or datetime.now(UTC),
        }
        if "lessons_learned" in data:
            changes["lessons_learned"] = data["lessons_learned"]

        updated = await self._save(existing, changes)

        logger.info(
            "decision outcome recorded",
            decision_id=decision_id,
            success=updated.outcome_success,
        )
        return updated

    async def flag_for_review(self, decision_id: str, data: Mapping[str, Any]) -> Decision:
        """Flag or unflag a decision for review.

        Unflagging clears the review date and reason.
        """
        _check_id(decision_id)
        _raise_if_invalid(validate_flag_for_review(data))

        existing = await self.get_decision(decision_id)
        changes: dict[str, Any] = {"flagged_for_review": data["flagged"]}
        if data["flagged"]:
            for field in ("next_review_date", "revisit_reason"):
                if field in data:
                    changes[field] = data[field]
        else:
            changes["next_review_date"] = None
            changes["revisit_reason"] = None

        updated = await self._save(existing, changes)

        logger.info(
            "decision review flag set",
            decision_id=decision_id,
            flagged=updated.flagged_for_review,
        )
        return updated

    async def mark_similar(self, decision_id: str, data: Mapping[str, Any]) -> Decision:
        """Link a decision to a similar one.

        The link is recorded on the source decision only. Linking the same
        pair twice leaves a single link.

        Raises:
            BadRequestError: If a decision is linked to itself
            NotFoundError: If either decision does not exist
        """
        _check_id(decision_id)
        _raise_if_invalid(validate_similar_link(data))

        similar_id = data["similar_to_id"].lower()
        if similar_id == decision_id.lower():
            raise BadRequestError("Cannot mark a decision as similar to itself")

        existing = await self.get_decision(decision_id)
        await self.get_decision(similar_id)

        if similar_id in existing.similar_decision_ids:
            logger.info("similar link already exists", decision_id=decision_id, similar_id=similar_id)
            return existing

        note = SimilarityNote(
            related_decision_id=similar_id,
            reason=data["reason"],
            comparison=data["comparison"],
        )
        updated = await self._save(
            existing,
            {
                "similar_decision_ids": [*existing.similar_decision_ids, similar_id],
                "similarity_notes": [*existing.similarity_notes, note],
            },
        )

        logger.info("similar decision linked", decision_id=decision_id, similar_id=similar_id)
        return updated

    async def delete_decision(self, decision_id: str) -> str:
        """Delete a decision and its search entry.

        Returns:
            The deleted decision's id
        """
        deleted = await self._repo.delete(_check_id(decision_id))
        if not deleted:
            raise NotFoundError("Decision", decision_id)

        logger.info("decision deleted", decision_id=decision_id)
        return decision_id

    async def list_decisions(self, raw_filters: Mapping[str, Any]) -> DecisionListResponse:
        """Search decisions and gather facets concurrently.

        Args:
            raw_filters: Untrusted filter values keyed by wire name

        Returns:
            DecisionListResponse with the page, metadata and filter summary

        Raises:
            RequestValidationFailed: With every invalid filter field
        """
        validation = validate_search_filters(raw_filters, self._limits)
        if not validation.valid:
            raise RequestValidationFailed(validation.errors)

        filter_set = validation.sanitized
        plan = build_query_plan(filter_set)

        page, metadata = await asyncio.gather(
            self._repo.search(plan),
            self._aggregator.gather(),
        )

        logger.info(
            "decisions listed",
            total=page.total,
            returned=len(page.decisions),
            sort=filter_set.sort.value,
            offset=filter_set.offset,
        )

        return DecisionListResponse.from_page(page, metadata, summarize_filters(filter_set))

    async def list_projects(self) -> list[str]:
        """Distinct project names, sorted."""
        return await self._repo.distinct_projects()

    async def analytics_summary(
        self,
        period: str | None = None,
        category: str | None = None,
    ) -> AnalyticsSummary:
        """Summarize decisions created within a look-back period.

        Args:
            period: week, month, quarter or all; defaults to month
            category: Optional category to restrict the summary to

        Raises:
            BadRequestError: If period or category is not a known value
        """
        if not period:
            period = AnalyticsPeriod.MONTH.value
        if period not in enum_values(AnalyticsPeriod):
            raise BadRequestError(
                f"period must be one of: {', '.join(enum_values(AnalyticsPeriod))}"
            )
        if category and category not in enum_values(DecisionCategory):
            raise BadRequestError(
                f"category must be one of: {', '.join(enum_values(DecisionCategory))}"
            )

        now = datetime.now(UTC)
        summary = await self._repo.analytics_summary(
            since=period_start(AnalyticsPeriod(period), now),
            category=DecisionCategory(category) if category else None,
            today=now.date(),
        )

        logger.info(
            "analytics summarized",
            period=period,
            category=category,
            total=summary.total_decisions,
        )
        return summary

    async def reindex(self) -> ReindexReport:
        """Run the bulk reindex sweep."""
        report = await self._repo.reindex_all()
        logger.info(
            "reindex sweep finished",
            scanned=report.scanned,
            updated=report.updated,
            stale=report.stale,
            missing=report.missing,
            skipped_concurrent=report.skipped_concurrent,
        )
        return report

    async def _save(self, existing: Decision, changes: Mapping[str, Any]) -> Decision:
        """Merge changes into a decision, bump updated_at and persist."""
        merged = existing.model_dump()
        merged.update(changes)
        updated = _build_decision(merged)
        updated.touch()

        if not await self._repo.save(updated):
            # Deleted between read and write
            raise NotFoundError("Decision", str(existing.id))
        return updated
