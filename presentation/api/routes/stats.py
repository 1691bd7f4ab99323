"""Server stats endpoints: session required, remote-exec backends privileged."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from domain.value_objects.backend_mode import BackendMode
from domain.value_objects.web_auth import Principal
from presentation.api.dependencies import get_auth_service, get_stats_service
from presentation.api.schemas.common import ErrorResponse
from presentation.api.schemas.stats import StatsResponse
from presentation.api.security import get_principal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stats", tags=["Stats"])

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing session or identity not allowed"},
    500: {"model": ErrorResponse, "description": "Backend not configured or upstream fetch failed"},
}


async def _collect(mode: Optional[BackendMode], principal: Optional[Principal]) -> StatsResponse:
    auth_service = get_auth_service()
    stats_service = get_stats_service()

    auth_service.authorize(principal, privileged=False)
    mode = stats_service.select_mode(mode)
    auth_service.authorize(principal, privileged=mode.uses_remote_exec)

    report = await stats_service.collect(mode)
    return StatsResponse.model_validate(report.to_dict())


@router.get(
    "",
    response_model=StatsResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    summary="Server stats",
    description="CPU, memory, disk and top processes from the configured monitoring backend.",
)
async def get_stats(principal: Optional[Principal] = Depends(get_principal)) -> StatsResponse:
    """Stats from the auto-selected backend."""
    return await _collect(None, principal)


@router.get(
    "/{backend}",
    response_model=StatsResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
    summary="Server stats from a specific backend",
    description="Same payload as /stats, read through the named backend. "
    "topProcesses is absent for netdata.",
)
async def get_stats_from(
    backend: BackendMode,
    principal: Optional[Principal] = Depends(get_principal),
) -> StatsResponse:
    return await _collect(backend, principal)
