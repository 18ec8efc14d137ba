"""
Translation API - immediate translation, history and cache.

Endpoints for:
- Translating text now (bypasses the debounce, keeps single-flight + cache)
- Listing / removing / clearing history
- Cache statistics and clearing
"""
from fastapi import APIRouter, Depends, HTTPException, status

from langlink.api.deps import get_services
from langlink.schemas.translation import (
    CacheStatsResponse,
    HistoryItemResponse,
    HistoryResponse,
    TranslateRequest,
    TranslationResponse,
)
from langlink.services.container import AppServices
from langlink.services.core.models import TranslationOutcome
from langlink.services.history import HistoryItem

router = APIRouter()


def outcome_response(outcome: TranslationOutcome) -> TranslationResponse:
    return TranslationResponse(
        fingerprint=outcome.fingerprint,
        source_text=outcome.source_text,
        translated_text=outcome.translated_text,
        from_cache=outcome.from_cache,
    )


def history_item_response(item: HistoryItem) -> HistoryItemResponse:
    return HistoryItemResponse(**item.to_payload())


@router.post("/translate", response_model=TranslationResponse)
async def translate(req: TranslateRequest, services: AppServices = Depends(get_services)):
    """Translate immediately (the "translate now" shortcut)."""
    outcome = await services.scheduler.translate_now(
        req.text, req.source.to_language(), req.target.to_language()
    )
    return outcome_response(outcome)


@router.get("/history", response_model=HistoryResponse)
async def list_history(services: AppServices = Depends(get_services)):
    return HistoryResponse(
        items=[history_item_response(item) for item in services.history.items()],
        max_items=services.history.max_items,
    )


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(services: AppServices = Depends(get_services)):
    await services.history.clear()


@router.delete("/history/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_history_item(item_id: str, services: AppServices = Depends(get_services)):
    removed = await services.history.remove(item_id)
    if not removed:
        raise HTTPException(status_code=404, detail="History item not found")


@router.get("/cache", response_model=CacheStatsResponse)
async def cache_stats(services: AppServices = Depends(get_services)):
    return CacheStatsResponse(**(await services.cache.get_stats()))


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(services: AppServices = Depends(get_services)):
    await services.cache.clear()
