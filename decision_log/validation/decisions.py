"""Request validators for decision write paths.

Every validator runs all of its field checks and returns the complete,
ordered list of errors; none of them stops at the first failure.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from decision_log.errors import FieldError
from decision_log.models.enums import (
    DecisionCategory,
    DecisionType,
    OptimizedFor,
    enum_values,
)
from decision_log.validation.fields import (
    is_blank,
    validate_boolean,
    validate_date_string,
    validate_enum,
    validate_enum_array,
    validate_integer,
    validate_optional_string,
    validate_options_considered,
    validate_required_string,
    validate_string_array,
    validate_uuid,
)

CATEGORIES = enum_values(DecisionCategory)
DECISION_TYPES = enum_values(DecisionType)
OPTIMIZED_FOR_OPTIONS = enum_values(OptimizedFor)

TITLE_MAX_LENGTH = 200
REASONING_MIN_LENGTH = 10
OUTCOME_MIN_LENGTH = 20
LESSONS_MIN_LENGTH = 20
REVISIT_REASON_MIN_LENGTH = 10
SIMILAR_REASON_MIN_LENGTH = 10
SIMILAR_COMPARISON_MIN_LENGTH = 20


class ValidationResult(BaseModel):
    """Outcome of validating a request body."""

    valid: bool = Field(description="True when no field errors were found")
    errors: list[FieldError] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[FieldError | None]) -> "ValidationResult":
        """Build a result from a list of optional field errors."""
        found = [error for error in errors if error is not None]
        return cls(valid=not found, errors=found)


# Field checks shared by create and update, keyed by wire field name
FieldRule = Callable[[Any], FieldError | None]

OPTIONAL_FIELD_CHECKS: dict[str, FieldRule] = {
    "business_context": lambda v: validate_optional_string(v, "business_context"),
    "problem_statement": lambda v: validate_optional_string(v, "problem_statement"),
    "confidence_level": lambda v: validate_integer(v, "confidence_level", 1, 10, required=False),
    "optimized_for": lambda v: validate_enum_array(
        v, "optimized_for", OPTIMIZED_FOR_OPTIONS, required=False
    ),
    "tradeoffs_accepted": lambda v: validate_string_array(v, "tradeoffs_accepted", required=False),
    "tradeoffs_rejected": lambda v: validate_string_array(v, "tradeoffs_rejected", required=False),
    "tags": lambda v: validate_string_array(v, "tags", required=False),
    "stakeholders": lambda v: validate_string_array(v, "stakeholders", required=False),
    "assumptions": lambda v: validate_string_array(v, "assumptions", required=False),
    "invalidation_conditions": lambda v: validate_string_array(
        v, "invalidation_conditions", required=False
    ),
    "notes": lambda v: validate_optional_string(v, "notes"),
    "decision_type": lambda v: validate_enum(v, "decision_type", DECISION_TYPES, required=False),
    "flagged_for_review": lambda v: validate_boolean(v, "flagged_for_review"),
    "next_review_date": lambda v: validate_date_string(v, "next_review_date"),
    "revisit_reason": lambda v: validate_optional_string(v, "revisit_reason"),
}

# Fields that may appear in an update but never be cleared
NON_NULLABLE_FIELDS = frozenset({"title", "category"})

UPDATE_FIELD_CHECKS: dict[str, FieldRule] = {
    "title": lambda v: validate_optional_string(v, "title", 1, TITLE_MAX_LENGTH),
    "category": lambda v: validate_enum(v, "category", CATEGORIES, required=False),
    "project_name": lambda v: validate_optional_string(v, "project_name", 1),
    "chosen_option": lambda v: validate_optional_string(v, "chosen_option", 1),
    "reasoning": lambda v: validate_optional_string(v, "reasoning", REASONING_MIN_LENGTH),
    "options_considered": lambda v: validate_options_considered(
        v, "options_considered", required=False
    ),
    **OPTIONAL_FIELD_CHECKS,
}

UPDATABLE_FIELDS = frozenset(UPDATE_FIELD_CHECKS)


def _has_items(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def validate_create_decision(data: Mapping[str, Any]) -> ValidationResult:
    """Validate data for creating a new decision."""
    errors: list[FieldError | None] = [
        validate_required_string(data.get("title"), "title", 1, TITLE_MAX_LENGTH),
        validate_optional_string(data.get("project_name"), "project_name", 1),
        validate_required_string(data.get("chosen_option"), "chosen_option", 1),
        validate_required_string(data.get("reasoning"), "reasoning", REASONING_MIN_LENGTH),
        validate_enum(data.get("category"), "category", CATEGORIES, required=True),
        validate_options_considered(data.get("options_considered"), required=True),
    ]

    # At least one tradeoff, accepted or rejected
    if not (_has_items(data.get("tradeoffs_accepted")) or _has_items(data.get("tradeoffs_rejected"))):
        errors.append(
            FieldError(
                field="tradeoffs",
                message="Please provide at least one tradeoff (accepted or rejected)",
            )
        )

    errors.extend(check(data.get(name)) for name, check in OPTIONAL_FIELD_CHECKS.items())

    return ValidationResult.from_errors(errors)


def validate_update_decision(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a partial update.

    All fields are optional, but each field that is present must be valid.
    """
    errors: list[FieldError | None] = []

    for name, check in UPDATE_FIELD_CHECKS.items():
        if name not in data:
            continue
        if name in NON_NULLABLE_FIELDS and is_blank(data[name]):
            errors.append(FieldError(field=name, message="This field cannot be null"))
            continue
        errors.append(check(data[name]))

    return ValidationResult.from_errors(errors)


def validate_outcome_update(data: Mapping[str, Any]) -> ValidationResult:
    """Validate the narrow outcome-recording path."""
    return ValidationResult.from_errors(
        [
            validate_boolean(data.get("outcome_success"), "outcome_success", required=True),
            validate_required_string(data.get("outcome"), "outcome", OUTCOME_MIN_LENGTH),
            validate_optional_string(
                data.get("lessons_learned"), "lessons_learned", LESSONS_MIN_LENGTH
            ),
            validate_date_string(data.get("outcome_date"), "outcome_date"),
        ]
    )


def validate_similar_link(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a request linking a decision to a similar one."""
    return ValidationResult.from_errors(
        [
            validate_uuid(data.get("similar_to_id"), "similar_to_id"),
            validate_required_string(data.get("reason"), "reason", SIMILAR_REASON_MIN_LENGTH),
            validate_required_string(
                data.get("comparison"), "comparison", SIMILAR_COMPARISON_MIN_LENGTH
            ),
        ]
    )


def validate_flag_for_review(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a flag/unflag-for-review request."""
    return ValidationResult.from_errors(
        [
            validate_boolean(data.get("flagged"), "flagged", required=True),
            validate_date_string(data.get("next_review_date"), "next_review_date"),
            validate_optional_string(
                data.get("revisit_reason"), "revisit_reason", REVISIT_REASON_MIN_LENGTH
            ),
        ]
    )
