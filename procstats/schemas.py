from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MemoryStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rss: str = Field(description="Resident set size - total physical memory")
    heap_total: str = Field(alias="heapTotal", description="Virtual memory size of the process")
    heap_used: str = Field(alias="heapUsed", description="Memory unique to the process")
    external: str = Field(description="Memory shared with other processes")


class EluStats(BaseModel):
    raw: float = Field(ge=0, le=1, description="Utilization fraction since registration")
    percentage: str = Field(description="raw * 100 with two decimals and a % suffix")


class UptimeResponse(BaseModel):
    uptime: int = Field(ge=0, description="Uptime in seconds")


class MetricsResponse(BaseModel):
    memory: MemoryStats
    elu: Optional[EluStats] = Field(description="Null when utilization is not supported")
    timestamp: str = Field(description="Metrics collection timestamp (UTC)")


class StatsResponse(MetricsResponse):
    uptime: int = Field(ge=0, description="Uptime in seconds")
