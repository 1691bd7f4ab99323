"""Pydantic v2 response schemas for REST API."""

from presentation.api.schemas.common import ErrorResponse
from presentation.api.schemas.system import HealthResponse
from presentation.api.schemas.stats import (
    ProcessEntrySchema,
    ResourcesSchema,
    ServerSchema,
    StatsResponse,
    TopProcessesSchema,
    UsageSchema,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ProcessEntrySchema",
    "ResourcesSchema",
    "ServerSchema",
    "StatsResponse",
    "TopProcessesSchema",
    "UsageSchema",
]
