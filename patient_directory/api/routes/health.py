"""Health check endpoint for the API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from patient_directory import __version__
from patient_directory.api.dependencies import DirectoryServiceDep
from patient_directory.api.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(service: DirectoryServiceDep) -> HealthResponse:
    """Health check endpoint.

    Reports whether the dataset can be loaded. Always answers 200 so that
    monitoring tools can read the body; the ``status`` field carries the
    verdict.
    """
    source_health = service.check_health()
    overall_status = "healthy" if source_health.status == "available" else "unhealthy"

    if overall_status == "unhealthy":
        logger.warning(f"Health check: record source unavailable ({source_health.error})")

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        source=source_health
    )
