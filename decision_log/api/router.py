"""API router aggregation."""

from fastapi import APIRouter

from decision_log.api.decisions import router as decisions_router
from decision_log.api.health import router as health_router
from decision_log.api.maintenance import router as maintenance_router
from decision_log.api.projects import router as projects_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(decisions_router)
# Autocomplete source for project_name
api_router.include_router(projects_router)
api_router.include_router(maintenance_router)
