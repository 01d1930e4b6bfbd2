"""Health checks for process supervisors and load balancers.

Checks answer with the same envelope as every other route. Readiness
answers 503 with the failing checks while the decision store is unusable.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from decision_log.api.responses import error_response, success_response
from decision_log.config import settings

router = APIRouter(prefix="/health", tags=["health"])


class ServiceInfo(BaseModel):
    status: str
    version: str
    environment: str


class Readiness(BaseModel):
    """Per-dependency check results."""

    status: str
    checks: dict[str, str]


async def _database_check(request: Request) -> str:
    db = getattr(request.app.state, "db", None)
    if db is None:
        return "not_configured"
    return "ok" if await db.is_healthy() else "failed"


def _service_check(request: Request) -> str:
    service = getattr(request.app.state, "decision_service", None)
    return "ok" if service is not None else "not_configured"


@router.get("/")
async def health_check() -> JSONResponse:
    """Report the running version and environment."""
    return success_response(
        ServiceInfo(
            status="healthy",
            version=settings.app_version,
            environment=settings.app_env,
        )
    )


@router.get("/live")
async def liveness() -> JSONResponse:
    return success_response({"status": "alive"})


@router.get("/ready")
async def readiness(request: Request) -> JSONResponse:
    """Check that the database answers and the decision service is wired."""
    checks = {
        "database": await _database_check(request),
        "decision_service": _service_check(request),
    }
    if any(result != "ok" for result in checks.values()):
        return error_response(
            "Service not ready",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SERVICE_UNAVAILABLE",
            details=checks,
        )
    return success_response(Readiness(status="ready", checks=checks))
