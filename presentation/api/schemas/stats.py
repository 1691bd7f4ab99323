"""Stats response schemas (field names follow the dashboard's JSON)."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UsageSchema(BaseModel):
    used: float = Field(..., description="Used bytes")
    total: float = Field(..., description="Total bytes")


class ResourcesSchema(BaseModel):
    cpu: Optional[float] = Field(None, description="CPU usage percentage (0-100)")
    memory: Optional[UsageSchema] = None
    disk: Optional[UsageSchema] = None


class ServerSchema(BaseModel):
    name: str
    ip: str
    description: str


class ProcessEntrySchema(BaseModel):
    """One ranked process or container."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: float = Field(..., description="Percent for CPU, bytes for memory and disk IO")
    origin: str = Field(..., description="container or host")
    pid: Optional[str] = Field(None, description="Container id or host PID")
    user: Optional[str] = None
    image: Optional[str] = None
    secondary_metric: Optional[float] = Field(None, alias="secondaryMetric")


class TopProcessesSchema(BaseModel):
    cpu: List[ProcessEntrySchema] = Field(default_factory=list)
    memory: List[ProcessEntrySchema] = Field(default_factory=list)
    disk: List[ProcessEntrySchema] = Field(default_factory=list)


class StatsResponse(BaseModel):
    """Normalized server stats."""

    model_config = ConfigDict(populate_by_name=True)

    server: ServerSchema
    resources: ResourcesSchema
    top_processes: Optional[TopProcessesSchema] = Field(None, alias="topProcesses")
