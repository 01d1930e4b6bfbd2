"""Error taxonomy for the decision log.

Field validators never raise; they return structured errors that the
combinators collect. The exceptions below are raised by the service and
store layers and mapped to HTTP responses at the API boundary.
"""

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """A single field-scoped validation problem."""

    field: str = Field(description="Name of the offending field")
    message: str = Field(description="Human-readable description of the problem")


class DecisionLogError(Exception):
    """Base class for all decision log errors."""

    code = "SERVER_ERROR"
    status_code = 500


class RequestValidationFailed(DecisionLogError):
    """Raised when one or more fields of a request fail validation.

    Always carries the complete, ordered list of field errors.
    """

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, errors: list[FieldError]):
        super().__init__("Validation failed")
        self.errors = errors


class BadRequestError(DecisionLogError):
    """Raised for malformed requests not tied to a single named field."""

    code = "BAD_REQUEST"
    status_code = 400


class NotFoundError(DecisionLogError):
    """Raised when a requested decision has no row."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None):
        if resource_id:
            message = f'{resource} with id "{resource_id}" not found'
        else:
            message = f"{resource} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class StoreError(DecisionLogError):
    """Raised when the underlying persistence or search layer fails."""

    code = "SERVER_ERROR"
    status_code = 500
