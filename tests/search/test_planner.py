"""Tests for query planning."""

from decision_log.models.enums import DecisionCategory, OutcomeStatus, SortOption
from decision_log.search.filters import FilterSet
from decision_log.search.planner import (
    CategoryEquals,
    ConfidenceBetween,
    FlaggedEquals,
    OutcomeIs,
    PageWindow,
    ProjectEquals,
    SearchMatch,
    SortKey,
    TagsContainAll,
    build_query_plan,
    compute_has_more,
)


class TestBuildQueryPlan:
    """Tests for build_query_plan."""

    def test_no_filters_no_predicates(self):
        plan = build_query_plan(FilterSet())
        assert plan.predicates == ()
        assert plan.where_clause == ""
        assert plan.params == []
        assert plan.from_clause == "decisions AS d"
        assert plan.window == PageWindow(offset=0, limit=20)

    def test_all_filters(self):
        plan = build_query_plan(
            FilterSet(
                search="cache",
                category=DecisionCategory.PERFORMANCE,
                project="Billing",
                tags=("redis", "latency"),
                confidence_min=3,
                confidence_max=8,
                outcome_status=OutcomeStatus.SUCCESS,
                flagged=False,
                sort=SortOption.RELEVANCE,
            )
        )
        assert [type(p) for p in plan.predicates] == [
            SearchMatch,
            CategoryEquals,
            ProjectEquals,
            TagsContainAll,
            ConfidenceBetween,
            OutcomeIs,
            FlaggedEquals,
        ]
        assert plan.params == ['"cache"', "performance", "Billing", "redis", "latency", 3, 8, 1, 0]
        assert "JOIN decisions_fts" in plan.from_clause
        assert plan.where_clause.startswith("WHERE decisions_fts MATCH ?")

    def test_outcome_all_adds_no_predicate(self):
        plan = build_query_plan(FilterSet(outcome_status=OutcomeStatus.ALL))
        assert plan.predicates == ()

    def test_search_without_words_matches_nothing(self):
        plan = build_query_plan(FilterSet(search="!!!", sort=SortOption.RELEVANCE))
        assert plan.where_clause == "WHERE 0"
        assert plan.from_clause == "decisions AS d"
        assert "bm25" not in plan.order_clause


class TestPredicates:
    def test_search_match_binds_compiled_expression(self):
        plan = build_query_plan(FilterSet(search="read replicas"))
        assert plan.predicates == (SearchMatch('"read" "replicas"'),)
        assert plan.predicates[0].to_sql() == ("decisions_fts MATCH ?", ['"read" "replicas"'])

    def test_pending_is_null(self):
        assert OutcomeIs(OutcomeStatus.PENDING).to_sql() == ("d.outcome_success IS NULL", [])

    def test_failed_is_false(self):
        assert OutcomeIs(OutcomeStatus.FAILED).to_sql() == ("d.outcome_success = ?", [0])

    def test_confidence_open_ends(self):
        assert ConfidenceBetween(minimum=9).to_sql() == ("d.confidence_level >= ?", [9])
        assert ConfidenceBetween(maximum=4).to_sql() == ("d.confidence_level <= ?", [4])

    def test_tags_require_every_tag(self):
        sql, params = TagsContainAll(("a", "b")).to_sql()
        assert sql.count("EXISTS") == 2
        assert " AND " in sql
        assert params == ["a", "b"]


class TestSortKey:
    """Every order ends with the deterministic tiebreak."""

    def test_date_desc(self):
        assert SortKey(SortOption.DATE_DESC).to_sql() == "d.created_at DESC, d.id DESC"

    def test_confidence_nulls_last(self):
        sql = SortKey(SortOption.CONFIDENCE_ASC).to_sql()
        assert sql.startswith("d.confidence_level ASC NULLS LAST")
        assert sql.endswith("d.created_at DESC, d.id DESC")

    def test_relevance_uses_weighted_bm25(self):
        sql = SortKey(SortOption.RELEVANCE, uses_fts=True).to_sql()
        assert sql.startswith("bm25(decisions_fts, 10.0, 4.0, 2.0, 1.0)")
        assert sql.endswith("d.id DESC")

    def test_date_asc_ends_with_id(self):
        assert SortKey(SortOption.DATE_ASC).to_sql().endswith("d.id DESC")


class TestComputeHasMore:
    def test_boundaries(self):
        assert compute_has_more(offset=0, returned=20, total=25) is True
        assert compute_has_more(offset=20, returned=5, total=25) is False
        assert compute_has_more(offset=0, returned=0, total=0) is False
        assert compute_has_more(offset=0, returned=20, total=20) is False
