"""
WebSocket Router - debounced text input endpoint.

Message Types (JSON, client → server):
    - input: a text change for one input stream; translated once the
      stream has been quiet for the debounce window
    - network: connectivity signal {"online": bool} from the UI runtime

Server → client:
    - translation: settled result of the latest input of a stream
    - error: translation failed (provider error, bad message)
    - offline / online: network mode (also sent on connect)
"""
import asyncio
import logging
import uuid
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from langlink.api.websocket.connections import InputConnections, send_event, translation_event
from langlink.schemas.websocket_events import ErrorEvent, InputEvent, NetworkEvent
from langlink.services.container import AppServices
from langlink.services.exceptions import NetworkUnavailableError
from langlink.services.network import NetworkMode

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/input")
async def input_stream(websocket: WebSocket):
    services: AppServices = websocket.app.state.services
    connections: InputConnections = websocket.app.state.connections

    await websocket.accept()
    connection_id = uuid.uuid4().hex
    connections.register(connection_id, websocket)
    streams: Set[str] = set()
    sends: Set[asyncio.Task] = set()
    loop = asyncio.get_running_loop()

    def on_network_change(mode: NetworkMode):
        task = loop.create_task(send_event(websocket, {"type": mode.value}))
        sends.add(task)
        task.add_done_callback(sends.discard)

    unsubscribe = services.network.subscribe(on_network_change)
    logger.info(f"[InputSocket] Connected {connection_id[:8]}")

    try:
        await send_event(websocket, {"type": services.network.mode.value})
        while True:
            message = await websocket.receive_json()
            await _handle_message(services, connections, connection_id, websocket, message, streams)
    except WebSocketDisconnect:
        logger.info(f"[InputSocket] Disconnected {connection_id[:8]}")
    finally:
        unsubscribe()
        for key in streams:
            services.scheduler.forget(key)
        connections.unregister(connection_id)


async def _handle_message(
    services: AppServices,
    connections: InputConnections,
    connection_id: str,
    websocket: WebSocket,
    message: dict,
    streams: Set[str],
):
    message_type = message.get("type") if isinstance(message, dict) else None

    if message_type == "network":
        try:
            event = NetworkEvent(**message)
        except ValidationError as e:
            await send_event(websocket, ErrorEvent(message=f"Invalid network event: {e}").model_dump())
            return
        services.network.handle_signal(NetworkMode.ONLINE if event.online else NetworkMode.OFFLINE)
        return

    if message_type != "input":
        await send_event(websocket, ErrorEvent(message=f"Unknown message type: {message_type}").model_dump())
        return

    try:
        event = InputEvent(**message)
    except ValidationError as e:
        await send_event(websocket, ErrorEvent(message=f"Invalid input event: {e}").model_dump())
        return

    key = connections.stream_key(connection_id, event.stream)
    streams.add(key)
    try:
        future = services.scheduler.submit(
            event.text,
            event.source.to_language(),
            event.target.to_language(),
            stream=key,
        )
    except NetworkUnavailableError:
        await send_event(websocket, {"type": "offline"})
        return

    # Blank input settles immediately with an empty outcome (clears the output)
    if future.done() and not future.cancelled():
        await send_event(websocket, translation_event(event.stream, future.result()))
