"""Project name endpoint for autocomplete."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from decision_log.api.decisions import get_decision_service
from decision_log.api.responses import success_response
from decision_log.services.decision_service import DecisionService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(
    service: DecisionService = Depends(get_decision_service),
) -> JSONResponse:
    """List distinct project names, sorted."""
    return success_response(await service.list_projects())
