"""Tests for decision write-path validators."""

from decision_log.validation.decisions import (
    validate_create_decision,
    validate_flag_for_review,
    validate_outcome_update,
    validate_similar_link,
    validate_update_decision,
)
from decision_log.validation.fields import (
    validate_integer,
    validate_options_considered,
    validate_required_string,
    validate_uuid,
)


class TestFieldValidators:
    """Tests for single-field validators."""

    def test_required_string_trimmed_length(self):
        error = validate_required_string("   short   ", "reasoning", min_length=10)
        assert error.message == "Must be at least 10 characters (currently 5)"

    def test_required_string_whitespace_only(self):
        error = validate_required_string("   ", "title")
        assert error.message == "Cannot be empty or only whitespace"

    def test_integer_rejects_bool(self):
        assert validate_integer(True, "confidence_level", 1, 10).message == "Must be an integer"

    def test_integer_range(self):
        assert validate_integer(11, "confidence_level", 1, 10).message == "Must be between 1 and 10"
        assert validate_integer(10, "confidence_level", 1, 10) is None

    def test_options_need_pros_and_cons(self):
        error = validate_options_considered([{"name": "A", "description": "B", "pros": []}])
        assert "'cons'" in error.message

    def test_uuid(self):
        assert validate_uuid("not-a-uuid", "similar_to_id").message == "Invalid UUID format"
        assert validate_uuid("3f2b8a4e-9c1d-4e7a-8b2f-1a2b3c4d5e6f", "similar_to_id") is None


class TestValidateCreateDecision:
    """Tests for validate_create_decision."""

    def test_valid(self, decision_payload):
        result = validate_create_decision(decision_payload())
        assert result.valid
        assert result.errors == []

    def test_project_is_optional(self, decision_payload):
        payload = decision_payload()
        del payload["project_name"]
        assert validate_create_decision(payload).valid

    def test_reports_every_error(self):
        result = validate_create_decision({"confidence_level": 42, "tags": "db"})
        fields = [e.field for e in result.errors]
        assert fields == [
            "title",
            "chosen_option",
            "reasoning",
            "category",
            "options_considered",
            "tradeoffs",
            "confidence_level",
            "tags",
        ]

    def test_rejected_tradeoff_is_enough(self, decision_payload):
        payload = decision_payload(tradeoffs_accepted=[], tradeoffs_rejected=["latency"])
        assert validate_create_decision(payload).valid

    def test_invalid_enum_values(self, decision_payload):
        result = validate_create_decision(
            decision_payload(category="misc", optimized_for=["speed", "vibes"])
        )
        assert [e.field for e in result.errors] == ["category", "optimized_for"]


class TestValidateUpdateDecision:
    """Tests for partial update validation."""

    def test_empty_update_is_valid(self):
        assert validate_update_decision({}).valid

    def test_single_field(self):
        assert validate_update_decision({"notes": "Revisit in Q3"}).valid

    def test_title_cannot_be_cleared(self):
        result = validate_update_decision({"title": None, "category": ""})
        assert [e.message for e in result.errors] == [
            "This field cannot be null",
            "This field cannot be null",
        ]

    def test_invalid_supplied_field(self):
        result = validate_update_decision({"reasoning": "short", "decision_type": "maybe"})
        assert [e.field for e in result.errors] == ["reasoning", "decision_type"]


class TestNarrowWritePaths:
    def test_outcome_requires_text_and_success(self):
        result = validate_outcome_update({})
        assert [e.field for e in result.errors] == ["outcome_success", "outcome"]

    def test_outcome_valid(self):
        result = validate_outcome_update(
            {
                "outcome": "Query latency dropped by half.",
                "outcome_success": True,
                "outcome_date": "2025-03-01T12:00:00Z",
            }
        )
        assert result.valid

    def test_outcome_bad_date(self):
        result = validate_outcome_update(
            {"outcome": "Worked as intended overall.", "outcome_success": False, "outcome_date": "soon"}
        )
        assert result.errors[0].field == "outcome_date"

    def test_flag_requires_boolean(self):
        assert validate_flag_for_review({"flagged": "yes"}).errors[0].field == "flagged"
        assert validate_flag_for_review({"flagged": False}).valid

    def test_similar_link(self):
        result = validate_similar_link({"similar_to_id": "nope", "reason": "short"})
        assert [e.field for e in result.errors] == ["similar_to_id", "reason", "comparison"]
