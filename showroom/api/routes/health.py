"""Probe endpoints for the container platform.

``/health`` and ``/health/live`` never touch the database; ``/health/ready``
reports whether the catalog database answers.
"""

from fastapi import APIRouter

from showroom import __version__
from showroom.api.deps import DbSession
from showroom.config import settings
from showroom.infra.database import verify_db_connection
from showroom.infra.logging import get_logger
from showroom.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


def _report(checks: dict[str, bool]) -> HealthResponse:
    return HealthResponse(
        status="healthy" if all(checks.values()) else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Startup probe: the process is up and routing requests."""
    return _report({})


@router.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    return _report({"alive": True})


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready(db: DbSession) -> HealthResponse:
    """Readiness probe.

    Always answers 200; a ``degraded`` status tells the platform to hold
    traffic until the database is back.
    """
    report = _report({"database": await verify_db_connection(db)})
    if report.status != "healthy":
        logger.warning("Catalog not ready", checks=report.checks)
    return report
