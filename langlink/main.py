"""
LangLink - Main Application

This is the entry point for the local FastAPI service the translation UI
talks to. It handles:
- REST API endpoints (translate, history, metrics, network, playback, speech)
- WebSocket endpoint for the debounced text input stream
- Wiring of the resilience-layer services (built once per process)
"""
from contextlib import asynccontextmanager
import logging
import time
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from langlink import __version__
from langlink.api import router as api_router
from langlink.api.errors import register_exception_handlers
from langlink.api.websocket import InputConnections, router as ws_router
from langlink.config.redis import close_redis, create_redis
from langlink.config.settings import Settings, get_settings
from langlink.services.audio.capabilities import Available
from langlink.services.container import AppServices, build_services
from langlink.services.metrics import start_metrics_server

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the service graph unless one was injected (tests), loads the
    persisted records and wires the input socket registry to the scheduler.
    """
    # === STARTUP ===
    logger.info("🚀 Starting LangLink...")
    app_settings: Settings = app.state.settings
    redis_client = None

    services: Optional[AppServices] = getattr(app.state, "services", None)
    if services is None:
        redis_client = create_redis(app_settings)
        services = build_services(app_settings, redis_client)
        app.state.services = services
        logger.info("✅ Services built")

    await services.load()
    logger.info("✅ Persisted state loaded")

    if isinstance(services.local_synthesis, Available):
        logger.info("✅ On-device speech synthesis available")
    else:
        logger.warning(f"⚠️ On-device speech synthesis unavailable: {services.local_synthesis.reason}")

    services.scheduler.set_listener(app.state.connections.deliver)

    if app_settings.METRICS_SERVER_ENABLED:
        start_metrics_server(app_settings.METRICS_SERVER_PORT)
        logger.info(f"✅ Prometheus metrics on :{app_settings.METRICS_SERVER_PORT}")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")
    services.scheduler.set_listener(None)
    await services.shutdown()
    if redis_client is not None:
        await close_redis(redis_client)


def create_app(services: Optional[AppServices] = None, app_settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application; `services` may be injected for tests."""
    app = FastAPI(
        title="LangLink",
        description="Text and speech translation with offline-aware fallbacks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings or (services.settings if services is not None else settings)
    app.state.connections = InputConnections()
    if services is not None:
        app.state.services = services

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include REST API routes
    app.include_router(api_router, prefix="/api")

    # Include WebSocket routes
    app.include_router(ws_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "LangLink",
            "version": __version__,
            "status": "running",
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        services: AppServices = app.state.services
        return {
            "status": "ok",
            "timestamp": time.time(),
            "network": services.network.mode.value,
            "playing": services.arbiter.is_playing,
            "local_synthesis": isinstance(services.local_synthesis, Available),
            "speech_recognition": services.recognition.available,
            "input_connections": len(app.state.connections),
        }

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run("langlink.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
