"""
Exception → HTTP status mapping for the REST surface.

NetworkUnavailableError → 503, ProviderError → 502,
PlaybackBusyError → 409, UnsupportedCapabilityError → 501,
PlaybackError → 500.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from langlink.services.exceptions import (
    NetworkUnavailableError,
    PlaybackBusyError,
    PlaybackError,
    ProviderError,
    UnsupportedCapabilityError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NetworkUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ProviderError: status.HTTP_502_BAD_GATEWAY,
    PlaybackBusyError: status.HTTP_409_CONFLICT,
    UnsupportedCapabilityError: status.HTTP_501_NOT_IMPLEMENTED,
    PlaybackError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def register_exception_handlers(app: FastAPI):
    for exc_class, status_code in ERROR_STATUS.items():

        async def handler(request: Request, exc: Exception, status_code: int = status_code):
            logger.warning(f"[API] {request.method} {request.url.path} → {status_code}: {exc}")
            return JSONResponse(
                status_code=status_code,
                content={"detail": str(exc), "error": type(exc).__name__},
            )

        app.add_exception_handler(exc_class, handler)
