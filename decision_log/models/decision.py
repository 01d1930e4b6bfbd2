"""Decision model for logged engineering and product decisions."""

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from decision_log.models.base import BaseEntity
from decision_log.models.enums import DecisionCategory, DecisionType, OptimizedFor
from decision_log.validation.fields import parse_iso_datetime

# Fields a client may never write directly
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})

LIST_FIELDS = (
    "tags",
    "stakeholders",
    "options_considered",
    "tradeoffs_accepted",
    "tradeoffs_rejected",
    "optimized_for",
    "assumptions",
    "invalidation_conditions",
    "similar_decision_ids",
    "related_decision_ids",
    "similarity_notes",
)


class DecisionOption(BaseModel):
    """An option considered while making a decision."""

    name: str = Field(min_length=1, description="Short name of the option")
    description: str = Field(description="What the option entails")
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)


class SimilarityNote(BaseModel):
    """Why a decision relates to another one."""

    related_decision_id: str = Field(description="UUID of the related decision")
    reason: str = Field(description="Why the decisions are similar")
    comparison: str = Field(description="How the decisions compare")


class Decision(BaseEntity):
    """A logged decision with context, rationale and a later outcome.

    The search index is not part of this model: it is derived from these
    fields by the store on every write and cannot be set by clients.
    """

    # Classification
    title: str = Field(min_length=1, max_length=200, description="What was decided")
    category: DecisionCategory = Field(default=DecisionCategory.OTHER)
    project_name: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list)

    # Narrative
    business_context: str | None = Field(default=None)
    problem_statement: str | None = Field(default=None)
    chosen_option: str | None = Field(default=None)
    reasoning: str | None = Field(default=None)
    notes: str | None = Field(default=None)
    stakeholders: list[str] = Field(default_factory=list)

    # Decision metadata
    confidence_level: int | None = Field(default=None, ge=1, le=10)
    decision_type: DecisionType | None = Field(default=None)
    options_considered: list[DecisionOption] = Field(default_factory=list)

    # Tradeoffs
    tradeoffs_accepted: list[str] = Field(default_factory=list)
    tradeoffs_rejected: list[str] = Field(default_factory=list)
    optimized_for: list[OptimizedFor] = Field(default_factory=list)

    # Reflection and review
    assumptions: list[str] = Field(default_factory=list)
    invalidation_conditions: list[str] = Field(default_factory=list)
    flagged_for_review: bool = Field(default=False)
    next_review_date: date | None = Field(default=None)
    revisit_reason: str | None = Field(default=None)

    # Outcome, recorded later
    outcome: str | None = Field(default=None)
    outcome_date: datetime | None = Field(default=None)
    outcome_success: bool | None = Field(
        default=None,
        description="True/False once known, None while pending",
    )
    lessons_learned: str | None = Field(default=None)

    # Relationships
    similar_decision_ids: list[str] = Field(default_factory=list)
    related_decision_ids: list[str] = Field(default_factory=list)
    similarity_notes: list[SimilarityNote] = Field(default_factory=list)

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("flagged_for_review", mode="before")
    @classmethod
    def _none_as_unflagged(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("decision_type", mode="before")
    @classmethod
    def _blank_type_as_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        # Insertion order is kept for display
        return list(dict.fromkeys(tag for tag in value if tag))

    @field_validator("next_review_date", mode="before")
    @classmethod
    def _date_from_iso(cls, value: Any) -> Any:
        # Accept full ISO datetimes for a date field
        if value == "":
            return None
        parsed = parse_iso_datetime(value) if isinstance(value, str) else None
        return parsed.date() if parsed else value

    @field_validator("outcome_date", mode="before")
    @classmethod
    def _datetime_from_iso(cls, value: Any) -> Any:
        if value == "":
            return None
        parsed = parse_iso_datetime(value) if isinstance(value, str) else None
        if parsed is None:
            return value
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    @field_validator("project_name")
    @classmethod
    def _blank_project_as_none(cls, value: str | None) -> str | None:
        return value or None

    @property
    def is_pending(self) -> bool:
        """Check if the decision's outcome has not been recorded yet."""
        return self.outcome_success is None
