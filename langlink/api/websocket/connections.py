"""
Input connections - routes settled translations back to their socket.

The RequestScheduler is shared by every connection, so each socket's input
streams are namespaced as "<connection_id>/<stream>". The scheduler only
calls deliver() for the latest input of a stream; superseded results never
reach the client.
"""
import logging
from typing import Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from langlink.schemas.websocket_events import ErrorEvent, TranslationEvent
from langlink.services.core.models import TranslationOutcome
from langlink.services.exceptions import NetworkUnavailableError

logger = logging.getLogger(__name__)


async def send_event(websocket: WebSocket, payload: dict) -> bool:
    """Send one JSON event; returns False if the socket is already gone."""
    try:
        await websocket.send_json(payload)
        return True
    except (WebSocketDisconnect, RuntimeError) as e:
        logger.debug(f"[InputConnections] Dropping event for closed socket: {e}")
        return False


def translation_event(stream: str, outcome: TranslationOutcome) -> dict:
    return TranslationEvent(
        stream=stream,
        fingerprint=outcome.fingerprint,
        source_text=outcome.source_text,
        translated_text=outcome.translated_text,
        from_cache=outcome.from_cache,
    ).model_dump()


class InputConnections:
    """Registry of open /ws/input sockets keyed by connection id."""

    def __init__(self):
        self._sockets: Dict[str, WebSocket] = {}

    @staticmethod
    def stream_key(connection_id: str, stream: str) -> str:
        return f"{connection_id}/{stream}"

    def register(self, connection_id: str, websocket: WebSocket):
        self._sockets[connection_id] = websocket

    def unregister(self, connection_id: str):
        self._sockets.pop(connection_id, None)

    def __len__(self) -> int:
        return len(self._sockets)

    async def deliver(
        self,
        stream_key: str,
        outcome: Optional[TranslationOutcome],
        error: Optional[Exception],
    ):
        """Scheduler listener: push the settled result of the latest input."""
        connection_id, _, stream = stream_key.partition("/")
        websocket = self._sockets.get(connection_id)
        if websocket is None:
            return

        if isinstance(error, NetworkUnavailableError):
            await send_event(websocket, {"type": "offline"})
        elif error is not None:
            await send_event(websocket, ErrorEvent(stream=stream, message=str(error)).model_dump())
        elif outcome is not None:
            await send_event(websocket, translation_event(stream, outcome))
