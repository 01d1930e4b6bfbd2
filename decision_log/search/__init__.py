"""Decision search: filter validation, query planning and indexing.

This package provides:
- validate_search_filters: untrusted parameters to a sanitized FilterSet
- build_query_plan: FilterSet to predicates, sort and page window
- reindex / compile_match_query: the derived full-text index
- MetadataAggregator: concurrent facet gathering
- summarize_filters: human-readable description of active filters
- AnalyticsSummary: counts and success rates over a look-back period
"""

from decision_log.search.analytics import AnalyticsSummary, period_start
from decision_log.search.filters import (
    FilterSet,
    FilterValidationResult,
    SearchLimits,
    validate_search_filters,
)
from decision_log.search.index import SearchIndex, compile_match_query, reindex
from decision_log.search.metadata import FacetStore, MetadataAggregator
from decision_log.search.planner import QueryPlan, build_query_plan
from decision_log.search.schemas import (
    ConfidenceRange,
    DecisionListResponse,
    DecisionPage,
    OutcomeStats,
    ReindexReport,
    SearchMetadata,
)
from decision_log.search.summary import FilterSummary, summarize_filters

__all__ = [
    # Analytics
    "AnalyticsSummary",
    "period_start",
    # Filters
    "FilterSet",
    "FilterValidationResult",
    "SearchLimits",
    "validate_search_filters",
    # Index
    "SearchIndex",
    "compile_match_query",
    "reindex",
    # Planning
    "QueryPlan",
    "build_query_plan",
    # Metadata
    "FacetStore",
    "MetadataAggregator",
    # Schemas
    "ConfidenceRange",
    "DecisionListResponse",
    "DecisionPage",
    "OutcomeStats",
    "ReindexReport",
    "SearchMetadata",
    # Summary
    "FilterSummary",
    "summarize_filters",
]
