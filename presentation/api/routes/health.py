"""Health check endpoint: no authentication required."""

import logging
import time

from fastapi import APIRouter

from domain.exceptions import ConfigurationError
from presentation.api.dependencies import get_stats_service
from presentation.api.schemas.system import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])

# Track startup time for uptime calculation
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Reports which monitoring backend would serve /stats. No authentication required.",
)
async def health_check() -> HealthResponse:
    """Report the configured backend without contacting it."""
    backend = None
    detail = None
    try:
        backend = get_stats_service().resolve_mode().value
    except ConfigurationError as e:
        detail = e.message

    return HealthResponse(
        status="ok" if backend else "degraded",
        backend=backend,
        detail=detail,
        uptime_seconds=round(time.time() - _start_time, 1),
    )
