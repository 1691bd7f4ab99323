"""Health check schemas."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field("ok", description="Overall health status")
    backend: Optional[str] = Field(None, description="Auto-selected monitoring backend")
    detail: Optional[str] = Field(None, description="Why no backend is usable")
    uptime_seconds: Optional[float] = Field(None, description="Service uptime in seconds")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
