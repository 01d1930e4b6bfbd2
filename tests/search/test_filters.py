"""Tests for search filter validation and sanitization."""

from decision_log.models.enums import DecisionCategory, OutcomeStatus, SortOption
from decision_log.search.filters import (
    SQLITE_MAX_INTEGER,
    SearchLimits,
    validate_confidence_range,
    validate_flagged,
    validate_limit,
    validate_offset,
    validate_search_filters,
    validate_search_term,
    validate_sort,
    validate_tags,
)

LIMITS = SearchLimits()


class TestValidateSearchTerm:
    """Tests for validate_search_term."""

    def test_collapses_whitespace(self):
        check = validate_search_term("  redis    cache \t layer ", LIMITS)
        assert check.ok
        assert check.value == "redis cache layer"

    def test_blank_is_absent(self):
        assert validate_search_term("   ", LIMITS).value is None
        assert validate_search_term("", LIMITS).value is None
        assert validate_search_term(None, LIMITS).value is None

    def test_too_long(self):
        check = validate_search_term("x" * 501, LIMITS)
        assert not check.ok
        assert check.error.field == "search"
        assert "500" in check.error.message

    def test_non_string(self):
        assert not validate_search_term(42, LIMITS).ok


class TestValidateTags:
    """Tests for validate_tags."""

    def test_dedupes_in_first_occurrence_order(self):
        check = validate_tags([" db ", "cache", "db", "", "api", "cache"], LIMITS)
        assert check.value == ("db", "cache", "api")

    def test_all_empty_is_absent(self):
        assert validate_tags(["", "  "], LIMITS).value is None
        assert validate_tags([], LIMITS).value is None

    def test_too_many_tags(self):
        check = validate_tags([f"t{i}" for i in range(21)], LIMITS)
        assert not check.ok
        assert check.error.message == "Too many tags (max 20)"

    def test_non_string_tag(self):
        check = validate_tags(["ok", 3], LIMITS)
        assert check.error.message == "All tags must be strings"

    def test_not_a_list(self):
        assert validate_tags("db", LIMITS).error.message == "Tags must be an array"


class TestValidateConfidenceRange:
    """Tests for confidence bound validation."""

    def test_min_greater_than_max(self):
        min_check, max_check = validate_confidence_range(8, 3)
        assert not min_check.ok
        assert min_check.error.field == "confidence_min"
        assert "cannot be greater than" in min_check.error.message
        assert max_check.ok

    def test_equal_bounds_allowed(self):
        min_check, max_check = validate_confidence_range(5, 5)
        assert (min_check.value, max_check.value) == (5, 5)

    def test_numeric_strings_and_integral_floats(self):
        min_check, max_check = validate_confidence_range("3", 9.0)
        assert min_check.value == 3
        assert max_check.value == 9

    def test_each_bound_reported_independently(self):
        min_check, max_check = validate_confidence_range("abc", 11)
        assert min_check.error.message == "confidence_min must be a number"
        assert max_check.error.message == "confidence_max must be between 1 and 10"

    def test_rejects_fractional_and_bool(self):
        min_check, max_check = validate_confidence_range(2.5, True)
        assert min_check.error.message == "confidence_min must be an integer"
        assert max_check.error.message == "confidence_max must be a number"


class TestValidateFlagged:
    def test_string_booleans(self):
        assert validate_flagged("true").value is True
        assert validate_flagged("false").value is False

    def test_invalid_string(self):
        assert not validate_flagged("yes").ok

    def test_absent(self):
        assert validate_flagged(None).value is None


class TestValidateSort:
    """Tests for sort defaulting and fallback."""

    def test_defaults_to_relevance_with_search(self):
        assert validate_sort(None, has_search=True).value is SortOption.RELEVANCE

    def test_defaults_to_date_desc_without_search(self):
        assert validate_sort(None, has_search=False).value is SortOption.DATE_DESC

    def test_relevance_without_search_falls_back(self):
        check = validate_sort("relevance", has_search=False)
        assert check.ok
        assert check.value is SortOption.DATE_DESC

    def test_explicit_sort_kept_with_search(self):
        assert validate_sort("date-asc", has_search=True).value is SortOption.DATE_ASC

    def test_unknown_sort(self):
        assert validate_sort("newest", has_search=False).error.field == "sort"


class TestValidateLimitAndOffset:
    def test_limit_clamped(self):
        assert validate_limit(500, LIMITS).value == 100
        assert validate_limit("250", LIMITS).value == 100

    def test_limit_default(self):
        assert validate_limit(None, LIMITS).value == 20

    def test_limit_must_be_positive(self):
        assert validate_limit(0, LIMITS).error.message == "Limit must be at least 1"

    def test_negative_offset_corrected(self):
        check = validate_offset(-5)
        assert check.ok
        assert check.value == 0

    def test_huge_offset_clamped_to_sqlite_range(self):
        assert validate_offset("1e30").value == SQLITE_MAX_INTEGER
        assert validate_offset("99999999999999999999").value == SQLITE_MAX_INTEGER

    def test_offset_not_a_number(self):
        assert validate_offset("ten").error.message == "Offset must be a number"


class TestValidateSearchFilters:
    """Tests for the combined filter validator."""

    def test_defaults(self):
        result = validate_search_filters({}, LIMITS)
        assert result.valid
        filters = result.sanitized
        assert filters.search is None
        assert filters.outcome_status is OutcomeStatus.ALL
        assert filters.sort is SortOption.DATE_DESC
        assert filters.limit == 20
        assert filters.offset == 0

    def test_sanitized_values(self):
        result = validate_search_filters(
            {
                "search": "  event   sourcing ",
                "category": "architecture",
                "project": "  Billing ",
                "tags": ["a", "b", "a"],
                "confidence_min": "6",
                "outcome_status": "pending",
                "flagged": "true",
                "limit": "10",
                "offset": "-3",
            },
            LIMITS,
        )
        assert result.valid
        filters = result.sanitized
        assert filters.search == "event sourcing"
        assert filters.category is DecisionCategory.ARCHITECTURE
        assert filters.project == "Billing"
        assert filters.tags == ("a", "b")
        assert filters.confidence_min == 6
        assert filters.confidence_max is None
        assert filters.outcome_status is OutcomeStatus.PENDING
        assert filters.flagged is True
        assert filters.sort is SortOption.RELEVANCE
        assert filters.limit == 10
        assert filters.offset == 0

    def test_accumulates_errors_in_field_order(self):
        result = validate_search_filters(
            {
                "category": "not-a-category",
                "confidence_min": 9,
                "confidence_max": 2,
                "outcome_status": "maybe",
                "limit": "lots",
            },
            LIMITS,
        )
        assert not result.valid
        assert result.sanitized is None
        assert [e.field for e in result.errors] == [
            "category",
            "confidence_min",
            "outcome_status",
            "limit",
        ]

    def test_whitespace_search_does_not_force_relevance(self):
        result = validate_search_filters({"search": "   ", "sort": "relevance"}, LIMITS)
        assert result.sanitized.search is None
        assert result.sanitized.sort is SortOption.DATE_DESC

    def test_custom_limits(self):
        limits = SearchLimits(default_limit=5, max_limit=8)
        assert validate_search_filters({}, limits).sanitized.limit == 5
        assert validate_search_filters({"limit": 50}, limits).sanitized.limit == 8
