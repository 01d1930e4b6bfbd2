"""Response envelopes and exception handlers.

Every response body is an envelope:
- success: {"success": true, "data": ..., "timestamp": ...}
- failure: {"success": false, "error": {"message", "code", "details"?}, "timestamp": ...}
"""

import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from decision_log.config import settings
from decision_log.errors import DecisionLogError, RequestValidationFailed, StoreError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Wrap data in the success envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "data": jsonable_encoder(data, by_alias=True),
            "timestamp": _timestamp(),
        },
    )


def created_response(data: Any) -> JSONResponse:
    return success_response(data, status.HTTP_201_CREATED)


def deleted_response(decision_id: str) -> JSONResponse:
    return success_response({"deleted_id": decision_id})


def error_response(
    message: str,
    status_code: int,
    code: str,
    details: Any = None,
) -> JSONResponse:
    """Build the error envelope; details are omitted when None."""
    error: dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "timestamp": _timestamp()},
    )


async def handle_decision_log_error(request: Request, exc: DecisionLogError) -> JSONResponse:
    """Map the error taxonomy to envelopes."""
    if isinstance(exc, RequestValidationFailed):
        return error_response(
            "Validation failed",
            exc.status_code,
            exc.code,
            details=[error.model_dump() for error in exc.errors],
        )

    if isinstance(exc, StoreError) or exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
        details = traceback.format_exception(exc) if settings.is_development else None
        return error_response(GENERIC_SERVER_ERROR, exc.status_code, exc.code, details)

    return error_response(str(exc), exc.status_code, exc.code)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed requests (e.g. a body that is not a JSON object)."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return error_response("Invalid request", status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", details)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; internals are only exposed in development."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    details = traceback.format_exception(exc) if settings.is_development else None
    return error_response(
        GENERIC_SERVER_ERROR,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "SERVER_ERROR",
        details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope exception handlers on an app."""
    app.add_exception_handler(DecisionLogError, handle_decision_log_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
