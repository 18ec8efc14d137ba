"""
Playback API - speak source/target text and manage voice preferences.

Endpoints for:
- Playing text (remote synthesis, on-device fallback)
- Stopping the active playback
- Reading / updating volume and rate
"""
from fastapi import APIRouter, Depends, HTTPException

from langlink.api.deps import get_services
from langlink.schemas.playback import (
    PlaybackRequest,
    PlaybackResponse,
    PlaybackStopResponse,
    PreferencesModel,
    PreferencesUpdate,
)
from langlink.services.audio.arbiter import PlaybackSide
from langlink.services.container import AppServices

router = APIRouter()


@router.post("/playback", response_model=PlaybackResponse)
async def play(req: PlaybackRequest, services: AppServices = Depends(get_services)):
    """
    Speak text; the response is sent once playback has ended.

    409 if another playback is active, 501 if on-device synthesis was needed
    but the runtime has none.
    """
    try:
        result = await services.arbiter.play(req.text, req.language.to_language(), PlaybackSide(req.side))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PlaybackResponse(
        side=result.side.value,
        path=result.path.value if result.path is not None else None,
        fallback_reason=result.fallback_reason,
        stopped=result.stopped,
    )


@router.post("/playback/stop", response_model=PlaybackStopResponse)
async def stop(services: AppServices = Depends(get_services)):
    return PlaybackStopResponse(stopped=services.arbiter.stop())


@router.get("/preferences", response_model=PreferencesModel)
async def get_preferences(services: AppServices = Depends(get_services)):
    prefs = services.preferences.current
    return PreferencesModel(volume=prefs.volume, rate=prefs.rate)


@router.put("/preferences", response_model=PreferencesModel)
async def update_preferences(req: PreferencesUpdate, services: AppServices = Depends(get_services)):
    prefs = await services.preferences.update(volume=req.volume, rate=req.rate)
    return PreferencesModel(volume=prefs.volume, rate=prefs.rate)
