"""Query planning for decision search.

Translates a sanitized FilterSet into ANDed predicates, a sort key and a
page window, each rendered to parameterised SQL over the decisions table
(aliased ``d``) and, when searching, the decisions_fts table.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from decision_log.models.enums import DecisionCategory, OutcomeStatus, SortOption
from decision_log.search.filters import FilterSet
from decision_log.search.index import RELEVANCE_WEIGHTS, compile_match_query

FTS_JOIN = "JOIN decisions_fts ON decisions_fts.rowid = d.row_id"

# Appended to every order so pages never overlap or skip rows
TIEBREAK = "d.created_at DESC, d.id DESC"


class Predicate(Protocol):
    """A single WHERE condition."""

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render as an SQL fragment and its bound parameters."""
        ...


@dataclass(frozen=True)
class SearchMatch:
    """Full-text match on the search index.

    A None match expression (no searchable words) matches nothing.
    """

    match: str | None

    def to_sql(self) -> tuple[str, list[Any]]:
        if self.match is None:
            return "0", []
        return "decisions_fts MATCH ?", [self.match]


@dataclass(frozen=True)
class CategoryEquals:
    category: DecisionCategory

    def to_sql(self) -> tuple[str, list[Any]]:
        return "d.category = ?", [self.category.value]


@dataclass(frozen=True)
class ProjectEquals:
    project: str

    def to_sql(self) -> tuple[str, list[Any]]:
        return "d.project_name = ?", [self.project]


@dataclass(frozen=True)
class TagsContainAll:
    """The decision's tags are a superset of the requested tags."""

    tags: tuple[str, ...]

    def to_sql(self) -> tuple[str, list[Any]]:
        clause = " AND ".join(
            "EXISTS (SELECT 1 FROM json_each(d.tags) WHERE json_each.value = ?)"
            for _ in self.tags
        )
        return f"({clause})", list(self.tags)


@dataclass(frozen=True)
class ConfidenceBetween:
    """Inclusive confidence range; either end may be open."""

    minimum: int | None = None
    maximum: int | None = None

    def to_sql(self) -> tuple[str, list[Any]]:
        if self.minimum is not None and self.maximum is not None:
            return "d.confidence_level BETWEEN ? AND ?", [self.minimum, self.maximum]
        if self.minimum is not None:
            return "d.confidence_level >= ?", [self.minimum]
        return "d.confidence_level <= ?", [self.maximum]


@dataclass(frozen=True)
class OutcomeIs:
    """Outcome state over the tri-state outcome_success column."""

    status: OutcomeStatus

    def to_sql(self) -> tuple[str, list[Any]]:
        if self.status is OutcomeStatus.PENDING:
            return "d.outcome_success IS NULL", []
        return "d.outcome_success = ?", [1 if self.status is OutcomeStatus.SUCCESS else 0]


@dataclass(frozen=True)
class FlaggedEquals:
    flagged: bool

    def to_sql(self) -> tuple[str, list[Any]]:
        return "d.flagged_for_review = ?", [int(self.flagged)]


@dataclass(frozen=True)
class SortKey:
    """Ordering of the result set.

    Relevance is only meaningful with an FTS join; without one it orders
    by the tiebreak alone.
    """

    option: SortOption
    uses_fts: bool = False

    def to_sql(self) -> str:
        if self.option is SortOption.RELEVANCE:
            if not self.uses_fts:
                return TIEBREAK
            weights = ", ".join(str(weight) for weight in RELEVANCE_WEIGHTS)
            # bm25() is lower for better matches
            return f"bm25(decisions_fts, {weights}), {TIEBREAK}"
        if self.option is SortOption.DATE_ASC:
            return "d.created_at ASC, d.id DESC"
        if self.option is SortOption.CONFIDENCE_DESC:
            return f"d.confidence_level DESC NULLS LAST, {TIEBREAK}"
        if self.option is SortOption.CONFIDENCE_ASC:
            return f"d.confidence_level ASC NULLS LAST, {TIEBREAK}"
        return TIEBREAK


@dataclass(frozen=True)
class PageWindow:
    """Half-open row window [offset, offset + limit)."""

    offset: int
    limit: int

    @property
    def end(self) -> int:
        return self.offset + self.limit


def _has_fts_match(predicates: Iterable[Predicate]) -> bool:
    return any(
        isinstance(predicate, SearchMatch) and predicate.match is not None
        for predicate in predicates
    )


@dataclass(frozen=True)
class QueryPlan:
    """Executable plan for one search request."""

    predicates: tuple[Predicate, ...] = field(default_factory=tuple)
    sort: SortKey = field(default_factory=lambda: SortKey(SortOption.DATE_DESC))
    window: PageWindow = field(default_factory=lambda: PageWindow(offset=0, limit=20))

    @property
    def uses_fts(self) -> bool:
        return _has_fts_match(self.predicates)

    @property
    def from_clause(self) -> str:
        if self.uses_fts:
            return f"decisions AS d {FTS_JOIN}"
        return "decisions AS d"

    @property
    def where_clause(self) -> str:
        if not self.predicates:
            return ""
        fragments = [predicate.to_sql()[0] for predicate in self.predicates]
        return "WHERE " + " AND ".join(fragments)

    @property
    def params(self) -> list[Any]:
        """Parameters bound by the WHERE clause, in order."""
        bound: list[Any] = []
        for predicate in self.predicates:
            bound.extend(predicate.to_sql()[1])
        return bound

    @property
    def order_clause(self) -> str:
        return f"ORDER BY {self.sort.to_sql()}"


def build_query_plan(filter_set: FilterSet) -> QueryPlan:
    """Build a query plan from sanitized filters.

    Absent filters contribute no predicate. Planning cannot fail.
    """
    predicates: list[Predicate] = []

    if filter_set.search:
        predicates.append(
            SearchMatch(compile_match_query(filter_set.search))
        )
    if filter_set.category is not None:
        predicates.append(CategoryEquals(filter_set.category))
    if filter_set.project:
        predicates.append(ProjectEquals(filter_set.project))
    if filter_set.tags:
        predicates.append(TagsContainAll(tuple(filter_set.tags)))
    if filter_set.confidence_min is not None or filter_set.confidence_max is not None:
        predicates.append(
            ConfidenceBetween(filter_set.confidence_min, filter_set.confidence_max)
        )
    if filter_set.outcome_status is not OutcomeStatus.ALL:
        predicates.append(OutcomeIs(filter_set.outcome_status))
    if filter_set.flagged is not None:
        predicates.append(FlaggedEquals(filter_set.flagged))

    return QueryPlan(
        predicates=tuple(predicates),
        sort=SortKey(filter_set.sort, uses_fts=_has_fts_match(predicates)),
        window=PageWindow(offset=filter_set.offset, limit=filter_set.limit),
    )


def compute_has_more(offset: int, returned: int, total: int) -> bool:
    """Whether rows remain beyond the current page."""
    return offset + returned < total
