"""Search filter validation and sanitization.

Turns an untrusted bag of query parameters into an immutable FilterSet,
or into the complete list of field errors. Every field is checked
independently; a bad category never hides a bad limit.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from decision_log.config import settings
from decision_log.errors import FieldError
from decision_log.models.enums import (
    DecisionCategory,
    OutcomeStatus,
    SortOption,
    enum_values,
)

CONFIDENCE_MIN = 1
CONFIDENCE_MAX = 10

# Largest value SQLite binds as INTEGER
SQLITE_MAX_INTEGER = 2**63 - 1


class SearchLimits(BaseModel):
    """Bounds applied while sanitizing filters."""

    default_limit: int = Field(default=20, ge=1)
    max_limit: int = Field(default=100, ge=1)
    max_search_length: int = Field(default=500, ge=1)
    max_tag_count: int = Field(default=20, ge=1)

    @classmethod
    def from_settings(cls) -> "SearchLimits":
        """Build limits from application settings."""
        return cls(
            default_limit=settings.search_default_limit,
            max_limit=settings.search_max_limit,
            max_search_length=settings.search_max_length,
            max_tag_count=settings.search_max_tags,
        )


class FilterSet(BaseModel):
    """Sanitized search filters for a single request.

    Absent filters are None and contribute nothing to a query.
    """

    model_config = ConfigDict(frozen=True)

    search: str | None = None
    category: DecisionCategory | None = None
    project: str | None = None
    tags: tuple[str, ...] | None = None
    confidence_min: int | None = None
    confidence_max: int | None = None
    outcome_status: OutcomeStatus = OutcomeStatus.ALL
    flagged: bool | None = None
    sort: SortOption = SortOption.DATE_DESC
    limit: int = 20
    offset: int = 0


class FilterValidationResult(BaseModel):
    """Either a sanitized FilterSet or the ordered field errors."""

    valid: bool
    sanitized: FilterSet | None = None
    errors: list[FieldError] = Field(default_factory=list)


@dataclass(frozen=True)
class FieldCheck:
    """Result of validating one filter field."""

    value: Any = None
    error: FieldError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _fail(field: str, message: str) -> FieldCheck:
    return FieldCheck(error=FieldError(field=field, message=message))


def _parse_integer(value: Any, field: str, label: str) -> FieldCheck:
    """Coerce ints, integral floats and numeric strings to int.

    Booleans are rejected even though bool subclasses int.
    """
    if isinstance(value, bool):
        return _fail(field, f"{label} must be a number")

    if isinstance(value, str):
        try:
            number: int | float = float(value.strip())
        except ValueError:
            return _fail(field, f"{label} must be a number")
    elif isinstance(value, int | float):
        number = value
    else:
        return _fail(field, f"{label} must be a number")

    if isinstance(number, float):
        if not number.is_integer():
            return _fail(field, f"{label} must be an integer")
        number = int(number)

    return FieldCheck(value=number)


def validate_search_term(search: Any, limits: SearchLimits) -> FieldCheck:
    """Trim a search term and collapse whitespace runs to one space."""
    if _is_absent(search):
        return FieldCheck()

    if not isinstance(search, str):
        return _fail("search", "Search term must be a string")

    trimmed = search.strip()
    if not trimmed:
        return FieldCheck()

    if len(trimmed) > limits.max_search_length:
        return _fail(
            "search",
            f"Search term too long (max {limits.max_search_length} characters)",
        )

    return FieldCheck(value=" ".join(trimmed.split()))


def validate_category(category: Any) -> FieldCheck:
    if _is_absent(category):
        return FieldCheck()

    if not isinstance(category, str):
        return _fail("category", "Category must be a string")

    if category not in enum_values(DecisionCategory):
        return _fail(
            "category",
            f"Invalid category. Must be one of: {', '.join(enum_values(DecisionCategory))}",
        )

    return FieldCheck(value=DecisionCategory(category))


def validate_project(project: Any) -> FieldCheck:
    if _is_absent(project):
        return FieldCheck()

    if not isinstance(project, str):
        return _fail("project", "Project must be a string")

    return FieldCheck(value=project.strip() or None)


def validate_tags(tags: Any, limits: SearchLimits) -> FieldCheck:
    """Validate a tag list, then trim, drop empties and dedupe in order."""
    if tags is None:
        return FieldCheck()

    if not isinstance(tags, list | tuple):
        return _fail("tags", "Tags must be an array")

    if not tags:
        return FieldCheck()

    if len(tags) > limits.max_tag_count:
        return _fail("tags", f"Too many tags (max {limits.max_tag_count})")

    if not all(isinstance(tag, str) for tag in tags):
        return _fail("tags", "All tags must be strings")

    sanitized = tuple(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))
    return FieldCheck(value=sanitized or None)


def validate_confidence_value(value: Any, field: str) -> FieldCheck:
    """Validate a single confidence bound in [1, 10]."""
    if _is_absent(value):
        return FieldCheck()

    check = _parse_integer(value, field, field)
    if not check.ok:
        return check

    if not CONFIDENCE_MIN <= check.value <= CONFIDENCE_MAX:
        return _fail(
            field,
            f"{field} must be between {CONFIDENCE_MIN} and {CONFIDENCE_MAX}",
        )

    return check


def validate_confidence_range(minimum: Any, maximum: Any) -> tuple[FieldCheck, FieldCheck]:
    """Validate both confidence bounds and their ordering.

    Each bound is reported on its own; the ordering error is attached to
    confidence_min and only checked when both bounds are valid.
    """
    min_check = validate_confidence_value(minimum, "confidence_min")
    max_check = validate_confidence_value(maximum, "confidence_max")

    if (
        min_check.ok
        and max_check.ok
        and min_check.value is not None
        and max_check.value is not None
        and min_check.value > max_check.value
    ):
        min_check = _fail(
            "confidence_min",
            "confidence_min cannot be greater than confidence_max",
        )

    return min_check, max_check


def validate_outcome_status(status: Any) -> FieldCheck:
    if _is_absent(status):
        return FieldCheck(value=OutcomeStatus.ALL)

    if not isinstance(status, str):
        return _fail("outcome_status", "Outcome status must be a string")

    if status not in enum_values(OutcomeStatus):
        return _fail(
            "outcome_status",
            f"Outcome status must be one of: {', '.join(enum_values(OutcomeStatus))}",
        )

    return FieldCheck(value=OutcomeStatus(status))


def validate_flagged(flagged: Any) -> FieldCheck:
    if _is_absent(flagged):
        return FieldCheck()

    # Query strings carry booleans as text
    if isinstance(flagged, str):
        if flagged == "true":
            return FieldCheck(value=True)
        if flagged == "false":
            return FieldCheck(value=False)
        return _fail("flagged", "Flagged must be a boolean (true or false)")

    if not isinstance(flagged, bool):
        return _fail("flagged", "Flagged must be a boolean")

    return FieldCheck(value=flagged)


def validate_sort(sort: Any, has_search: bool) -> FieldCheck:
    """Validate the sort option.

    Defaults to relevance when a search term is present and to date-desc
    otherwise. Relevance without a search term falls back to date-desc.
    """
    if _is_absent(sort):
        return FieldCheck(value=SortOption.RELEVANCE if has_search else SortOption.DATE_DESC)

    if not isinstance(sort, str):
        return _fail("sort", "Sort must be a string")

    if sort not in enum_values(SortOption):
        return _fail(
            "sort",
            f"Sort must be one of: {', '.join(enum_values(SortOption))}",
        )

    option = SortOption(sort)
    if option is SortOption.RELEVANCE and not has_search:
        return FieldCheck(value=SortOption.DATE_DESC)

    return FieldCheck(value=option)


def validate_limit(limit: Any, limits: SearchLimits) -> FieldCheck:
    """Validate the page size, clamping it to the configured maximum."""
    if _is_absent(limit):
        return FieldCheck(value=limits.default_limit)

    check = _parse_integer(limit, "limit", "Limit")
    if not check.ok:
        return check

    if check.value < 1:
        return _fail("limit", "Limit must be at least 1")

    return FieldCheck(value=min(check.value, limits.max_limit))


def validate_offset(offset: Any) -> FieldCheck:
    """Validate the page offset.

    Negative offsets become 0 and offsets past the SQLite integer range are
    clamped to it; such a page is simply empty.
    """
    if _is_absent(offset):
        return FieldCheck(value=0)

    check = _parse_integer(offset, "offset", "Offset")
    if not check.ok:
        return check

    return FieldCheck(value=min(max(check.value, 0), SQLITE_MAX_INTEGER))


def validate_search_filters(
    raw: Mapping[str, Any],
    limits: SearchLimits | None = None,
) -> FilterValidationResult:
    """Validate all search filters at once.

    Args:
        raw: Untrusted filter values keyed by wire name
        limits: Bounds to apply, defaults to application settings

    Returns:
        FilterValidationResult with a sanitized FilterSet, or every
        field error in field order
    """
    limits = limits or SearchLimits.from_settings()

    search = validate_search_term(raw.get("search"), limits)
    confidence_min, confidence_max = validate_confidence_range(
        raw.get("confidence_min"), raw.get("confidence_max")
    )
    checks: dict[str, FieldCheck] = {
        "search": search,
        "category": validate_category(raw.get("category")),
        "project": validate_project(raw.get("project")),
        "tags": validate_tags(raw.get("tags"), limits),
        "confidence_min": confidence_min,
        "confidence_max": confidence_max,
        "outcome_status": validate_outcome_status(raw.get("outcome_status")),
        "flagged": validate_flagged(raw.get("flagged")),
        # Sort depends on whether a usable search term survived sanitizing
        "sort": validate_sort(raw.get("sort"), has_search=bool(search.value)),
        "limit": validate_limit(raw.get("limit"), limits),
        "offset": validate_offset(raw.get("offset")),
    }

    errors = [check.error for check in checks.values() if check.error is not None]
    if errors:
        return FilterValidationResult(valid=False, errors=errors)

    sanitized = FilterSet(**{name: check.value for name, check in checks.items()})
    return FilterValidationResult(valid=True, sanitized=sanitized)
