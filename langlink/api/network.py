"""
Network API - the connectivity transport.

The UI forwards the runtime's online/offline events here; the monitor is
never updated from failed provider calls.
"""
from fastapi import APIRouter, Depends

from langlink.api.deps import get_services
from langlink.schemas.playback import NetworkStatusResponse
from langlink.services.container import AppServices
from langlink.services.network import NetworkMode

router = APIRouter()


def _status(services: AppServices) -> NetworkStatusResponse:
    return NetworkStatusResponse(mode=services.network.mode.value, online=services.network.is_online)


@router.get("/network", response_model=NetworkStatusResponse)
async def get_network(services: AppServices = Depends(get_services)):
    return _status(services)


@router.put("/network/{mode}", response_model=NetworkStatusResponse)
async def set_network(mode: NetworkMode, services: AppServices = Depends(get_services)):
    """Apply an `online` / `offline` signal (repeating the current mode is a no-op)."""
    services.network.handle_signal(mode)
    return _status(services)
