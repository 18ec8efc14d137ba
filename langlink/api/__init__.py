from fastapi import APIRouter

from langlink.api import metrics
from langlink.api import network
from langlink.api import playback
from langlink.api import speech
from langlink.api import translation

router = APIRouter()

router.include_router(translation.router)
router.include_router(metrics.router)
router.include_router(network.router)
router.include_router(playback.router)
router.include_router(speech.router)
