"""Human-readable summary of the filters applied to a listing."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from decision_log.models.enums import OutcomeStatus
from decision_log.search.filters import CONFIDENCE_MAX, CONFIDENCE_MIN, FilterSet

OUTCOME_LABELS = {
    OutcomeStatus.PENDING: "Pending outcome",
    OutcomeStatus.SUCCESS: "Successful",
    OutcomeStatus.FAILED: "Failed",
}


class ActiveFilter(BaseModel):
    """One applied filter, ready to render as a chip."""

    type: str = Field(description="Filter kind, e.g. 'category'")
    label: str
    value: str


class FilterSummary(BaseModel):
    """Description of the filters behind a listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    active_filter_count: int = 0
    description: str = "Showing all decisions"
    filters: list[ActiveFilter] = Field(default_factory=list)


def summarize_filters(filter_set: FilterSet) -> FilterSummary:
    """Summarize the active filters of a sanitized FilterSet.

    Example:
        >>> summarize_filters(FilterSet(tags=("db",))).description
        'Showing decisions with Tags: db'
    """
    active: list[ActiveFilter] = []

    if filter_set.search:
        active.append(ActiveFilter(type="search", label="Search", value=f'"{filter_set.search}"'))

    if filter_set.category:
        active.append(
            ActiveFilter(type="category", label="Category", value=filter_set.category.label)
        )

    if filter_set.project:
        active.append(ActiveFilter(type="project", label="Project", value=filter_set.project))

    if filter_set.tags:
        active.append(ActiveFilter(type="tags", label="Tags", value=", ".join(filter_set.tags)))

    if filter_set.confidence_min is not None or filter_set.confidence_max is not None:
        low = filter_set.confidence_min if filter_set.confidence_min is not None else CONFIDENCE_MIN
        high = filter_set.confidence_max if filter_set.confidence_max is not None else CONFIDENCE_MAX
        active.append(ActiveFilter(type="confidence", label="Confidence", value=f"{low}-{high}"))

    if filter_set.outcome_status is not OutcomeStatus.ALL:
        active.append(
            ActiveFilter(
                type="outcome",
                label="Outcome",
                value=OUTCOME_LABELS[filter_set.outcome_status],
            )
        )

    if filter_set.flagged is not None:
        active.append(
            ActiveFilter(type="flagged", label="Flagged", value="Yes" if filter_set.flagged else "No")
        )

    if not active:
        return FilterSummary()

    parts = ", ".join(f"{item.label}: {item.value}" for item in active)
    return FilterSummary(
        active_filter_count=len(active),
        description=f"Showing decisions with {parts}",
        filters=active,
    )
