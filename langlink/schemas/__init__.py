"""
Schemas Package

Pydantic models for API and WebSocket events.
"""

from langlink.schemas.websocket_events import (
    WebSocketEventBase,
    InputEvent,
    NetworkEvent,
    TranslationEvent,
    ErrorEvent,
)

__all__ = [
    "WebSocketEventBase",
    "InputEvent",
    "NetworkEvent",
    "TranslationEvent",
    "ErrorEvent",
]
