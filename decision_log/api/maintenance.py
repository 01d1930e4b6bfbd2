"""Maintenance endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from decision_log.api.decisions import get_decision_service
from decision_log.api.responses import success_response
from decision_log.services.decision_service import DecisionService

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.post("/reindex")
async def reindex(
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """Recompute the search index of every decision.

    Rows whose stored index already matches are left untouched. Stale or
    missing indexes are repaired and counted in the report.
    """
    return success_response(await service.reindex())
