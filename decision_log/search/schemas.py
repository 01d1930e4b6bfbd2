"""Response models for decision listings, facets and maintenance."""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from decision_log.models.decision import Decision
from decision_log.search.planner import compute_has_more
from decision_log.search.summary import FilterSummary


class CamelModel(BaseModel):
    """Base for payloads serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConfidenceRange(CamelModel):
    """Smallest and largest confidence level in use."""

    min: int
    max: int


class OutcomeStats(CamelModel):
    """Decision counts by outcome state."""

    total: int = 0
    pending: int = 0
    success: int = 0
    failed: int = 0


class SearchMetadata(CamelModel):
    """Facets describing the whole decision log."""

    available_categories: list[str] = Field(default_factory=list)
    available_projects: list[str] = Field(default_factory=list)
    available_tags: list[str] = Field(default_factory=list)
    confidence_range: ConfidenceRange | None = None
    outcome_stats: OutcomeStats = Field(default_factory=OutcomeStats)


class DecisionPage(BaseModel):
    """One page of matching decisions."""

    decisions: list[Decision] = Field(default_factory=list)
    total: int = Field(default=0, description="Matches across all pages")
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return compute_has_more(self.offset, len(self.decisions), self.total)


class DecisionListResponse(CamelModel):
    """Listing payload: a page, facets and the active filter summary."""

    decisions: list[Decision] = Field(default_factory=list)
    total: int = 0
    limit: int
    offset: int
    metadata: SearchMetadata
    summary: FilterSummary

    @computed_field(alias="hasMore")
    @property
    def has_more(self) -> bool:
        return compute_has_more(self.offset, len(self.decisions), self.total)

    @classmethod
    def from_page(
        cls,
        page: DecisionPage,
        metadata: SearchMetadata,
        summary: FilterSummary,
    ) -> "DecisionListResponse":
        return cls(
            decisions=page.decisions,
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            metadata=metadata,
            summary=summary,
        )


class ReindexReport(CamelModel):
    """Outcome of a bulk reindex sweep.

    stale and missing together form the consistency warning: rows whose
    stored index had drifted from their fields, or had none at all.
    """

    scanned: int = 0
    updated: int = 0
    stale: int = 0
    missing: int = 0
    skipped_concurrent: int = 0

    @property
    def consistent(self) -> bool:
        return self.stale == 0 and self.missing == 0
