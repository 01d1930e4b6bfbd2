"""Decision API endpoints.

Provides listing/search with filters, CRUD, outcome recording,
flag-for-review, similar-decision linking and the analytics summary.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from decision_log.api.responses import created_response, deleted_response, success_response
from decision_log.services.decision_service import DecisionService

router = APIRouter(prefix="/decisions", tags=["decisions"])

# Scalar filter parameters read verbatim from the query string
FILTER_PARAMS = (
    "search",
    "category",
    "project",
    "confidence_min",
    "confidence_max",
    "outcome_status",
    "flagged",
    "sort",
    "limit",
    "offset",
)


def get_decision_service(request: Request) -> DecisionService:
    """Get DecisionService from app state."""
    if not hasattr(request.app.state, "decision_service"):
        raise HTTPException(status_code=500, detail="DecisionService not initialized")
    return request.app.state.decision_service


def parse_filter_params(request: Request) -> dict[str, Any]:
    """Collect raw filter values from the query string.

    tags may be comma-separated, repeated, or both; all values are merged.
    """
    raw: dict[str, Any] = {name: request.query_params.get(name) for name in FILTER_PARAMS}

    tag_values = request.query_params.getlist("tags")
    if tag_values:
        raw["tags"] = [tag for value in tag_values for tag in value.split(",")]
    else:
        raw["tags"] = None

    return raw


@router.get("")
async def list_decisions(
    request: Request,
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Search and filter decisions.

    Returns the requested page together with facet metadata and a
    summary of the active filters.
    """
    result = await service.list_decisions(parse_filter_params(request))
    return success_response(result)


@router.post("")
async def create_decision(
    data: dict[str, Any] = Body(...),
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Create a new decision."""
    decision = await service.create_decision(data)
    return created_response(decision)


@router.get("/analytics/summary")
async def analytics_summary(
    period: str | None = None,
    category: str | None = None,
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Aggregated decision analytics.

    period is one of week, month (default), quarter or all.
    """
    return success_response(await service.analytics_summary(period, category))


@router.get("/{decision_id}")
async def get_decision(
    decision_id: str,
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Get a single decision."""
    return success_response(await service.get_decision(decision_id))


@router.put("/{decision_id}")
async def update_decision(
    decision_id: str,
    data: dict[str, Any] = Body(...),
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Partially update a decision.

    Only the supplied fields change. Protected fields are rejected.
    """
    return success_response(await service.update_decision(decision_id, data))


@router.delete("/{decision_id}")
async def delete_decision(
    decision_id: str,
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Delete a decision."""
    return deleted_response(await service.delete_decision(decision_id))


@router.put("/{decision_id}/outcome")
async def record_outcome(
    decision_id: str,
    data: dict[str, Any] = Body(...),
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Record the outcome of a decision."""
    return success_response(await service.record_outcome(decision_id, data))


@router.put("/{decision_id}/flag-for-review")
async def flag_for_review(
    decision_id: str,
    data: dict[str, Any] = Body(...),
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Flag or unflag a decision for review."""
    return success_response(await service.flag_for_review(decision_id, data))


@router.post("/{decision_id}/similar")
async def mark_similar(
    decision_id: str,
    data: dict[str, Any] = Body(...),
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Link a decision to a similar decision."""
    return success_response(await service.mark_similar(decision_id, data))
