from typing import Any, Dict, List
from pydantic import BaseModel


class MetricEventResponse(BaseModel):
    id: str
    timestamp: float
    stage: str
    latency_ms: float
    metadata: Dict[str, Any]


class MetricsListResponse(BaseModel):
    events: List[MetricEventResponse]


class StageSummary(BaseModel):
    count: int
    errors: int
    average_latency_ms: float


class MetricsSummaryResponse(BaseModel):
    stages: Dict[str, StageSummary]
