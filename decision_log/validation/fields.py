"""Field-level validators for decision write paths.

Each validator inspects one raw value and returns a FieldError or None.
Validators never raise, so the combinators in
decision_log.validation.decisions can report every problem at once.
"""

import re
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from decision_log.errors import FieldError

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_blank(value: Any) -> bool:
    """Treat None and the empty string identically as 'absent'."""
    return value is None or value == ""


def validate_required_string(
    value: Any,
    field: str,
    min_length: int | None = None,
    max_length: int | None = None,
) -> FieldError | None:
    """Validate a required string, measuring length after trimming."""
    if is_blank(value):
        return FieldError(field=field, message="This field is required")

    if not isinstance(value, str):
        return FieldError(field=field, message="Must be a string")

    trimmed = value.strip()
    if not trimmed:
        return FieldError(field=field, message="Cannot be empty or only whitespace")

    if min_length and len(trimmed) < min_length:
        return FieldError(
            field=field,
            message=f"Must be at least {min_length} characters (currently {len(trimmed)})",
        )

    if max_length and len(trimmed) > max_length:
        return FieldError(
            field=field,
            message=f"Must be at most {max_length} characters (currently {len(trimmed)})",
        )

    return None


def validate_optional_string(
    value: Any,
    field: str,
    min_length: int | None = None,
    max_length: int | None = None,
) -> FieldError | None:
    """Validate an optional string; absent values pass."""
    if is_blank(value):
        return None
    return validate_required_string(value, field, min_length, max_length)


def validate_integer(
    value: Any,
    field: str,
    minimum: int,
    maximum: int,
    required: bool = True,
) -> FieldError | None:
    """Validate an integer within an inclusive range."""
    if value is None:
        if required:
            return FieldError(field=field, message="This field is required")
        return None

    # bool is an int subclass but never a valid integer field value
    if isinstance(value, bool) or not isinstance(value, int | float):
        return FieldError(field=field, message="Must be an integer")

    if isinstance(value, float) and not value.is_integer():
        return FieldError(field=field, message="Must be an integer")

    if value < minimum or value > maximum:
        return FieldError(field=field, message=f"Must be between {minimum} and {maximum}")

    return None


def validate_enum(
    value: Any,
    field: str,
    valid_values: Sequence[str],
    required: bool = True,
) -> FieldError | None:
    """Validate membership in a closed set of wire values."""
    if is_blank(value):
        if required:
            return FieldError(field=field, message="This field is required")
        return None

    if value not in valid_values:
        return FieldError(
            field=field,
            message=f"Invalid value. Must be one of: {', '.join(valid_values)}",
        )

    return None


def validate_array(
    value: Any,
    field: str,
    required: bool = True,
    min_items: int | None = None,
) -> FieldError | None:
    """Validate that a value is a list, optionally with a minimum size."""
    if value is None:
        if required:
            return FieldError(field=field, message="This field is required")
        return None

    if not isinstance(value, list):
        return FieldError(field=field, message="Must be an array")

    if min_items and len(value) < min_items:
        plural = "s" if min_items > 1 else ""
        return FieldError(
            field=field,
            message=f"Must have at least {min_items} item{plural}",
        )

    return None


def validate_string_array(
    value: Any,
    field: str,
    required: bool = True,
    min_items: int | None = None,
) -> FieldError | None:
    """Validate a list whose items are all strings."""
    error = validate_array(value, field, required, min_items)
    if error or not value:
        return error

    for index, item in enumerate(value):
        if not isinstance(item, str):
            return FieldError(
                field=field,
                message=f"All items must be strings (item {index} is not)",
            )

    return None


def validate_enum_array(
    value: Any,
    field: str,
    valid_values: Sequence[str],
    required: bool = True,
    min_items: int | None = None,
) -> FieldError | None:
    """Validate a list whose items all belong to a closed set."""
    error = validate_array(value, field, required, min_items)
    if error or not value:
        return error

    for index, item in enumerate(value):
        if item not in valid_values:
            return FieldError(
                field=field,
                message=f"Invalid value at index {index}. Must be one of: {', '.join(valid_values)}",
            )

    return None


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 date or datetime string, or return None."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def validate_date_string(
    value: Any,
    field: str,
    required: bool = False,
) -> FieldError | None:
    """Validate an ISO-8601 date or datetime string."""
    if is_blank(value):
        if required:
            return FieldError(field=field, message="This field is required")
        return None

    if not isinstance(value, str):
        return FieldError(field=field, message="Must be a string (ISO-8601 date format)")

    if parse_iso_datetime(value) is None:
        return FieldError(field=field, message="Invalid date format (expected ISO-8601)")

    return None


def validate_boolean(
    value: Any,
    field: str,
    required: bool = False,
) -> FieldError | None:
    """Validate a strict JSON boolean."""
    if value is None:
        if required:
            return FieldError(field=field, message="This field is required")
        return None

    if not isinstance(value, bool):
        return FieldError(field=field, message="Must be a boolean (true or false)")

    return None


def validate_options_considered(
    value: Any,
    field: str = "options_considered",
    required: bool = True,
) -> FieldError | None:
    """Validate the list of options considered for a decision."""
    error = validate_array(value, field, required, 1 if required else None)
    if error or not value:
        return error

    for index, option in enumerate(value):
        if not isinstance(option, dict):
            return FieldError(field=field, message=f"Option at index {index} must be an object")

        name = option.get("name")
        if not name or not isinstance(name, str):
            return FieldError(
                field=field,
                message=f"Option at index {index} must have a 'name' (string)",
            )

        description = option.get("description")
        if not description or not isinstance(description, str):
            return FieldError(
                field=field,
                message=f"Option at index {index} must have a 'description' (string)",
            )

        for key in ("pros", "cons"):
            items = option.get(key)
            if not isinstance(items, list):
                return FieldError(
                    field=field,
                    message=f"Option at index {index} must have a '{key}' array",
                )
            if not all(isinstance(item, str) for item in items):
                return FieldError(
                    field=field,
                    message=f"Option at index {index} '{key}' must contain only strings",
                )

    return None


def validate_uuid(value: Any, field: str) -> FieldError | None:
    """Validate a UUID string."""
    if not value or not isinstance(value, str):
        return FieldError(field=field, message="Must be a valid UUID string")

    if not UUID_PATTERN.match(value):
        return FieldError(field=field, message="Invalid UUID format")

    return None
