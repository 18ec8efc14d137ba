from typing import Optional

from fastapi import APIRouter, Depends, status

from langlink.api.deps import get_services
from langlink.schemas.metrics import MetricEventResponse, MetricsListResponse, MetricsSummaryResponse
from langlink.services.container import AppServices
from langlink.services.metrics import MetricStage

router = APIRouter()


@router.get("/metrics", response_model=MetricsListResponse)
async def list_metrics(stage: Optional[MetricStage] = None, services: AppServices = Depends(get_services)):
    """Buffered metric events, oldest first."""
    return MetricsListResponse(
        events=[MetricEventResponse(**event.to_payload()) for event in services.metrics.events(stage)]
    )


@router.get("/metrics/summary", response_model=MetricsSummaryResponse)
async def metrics_summary(services: AppServices = Depends(get_services)):
    """Per-stage count, error count and average latency."""
    return MetricsSummaryResponse(stages=services.metrics.summary())


@router.delete("/metrics", status_code=status.HTTP_204_NO_CONTENT)
async def clear_metrics(services: AppServices = Depends(get_services)):
    await services.metrics.clear()
