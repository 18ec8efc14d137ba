from fastapi import Request, WebSocket

from langlink.services.container import AppServices


def get_services(request: Request) -> AppServices:
    """Dependency returning the service graph built at startup."""
    return request.app.state.services


def get_ws_services(websocket: WebSocket) -> AppServices:
    return websocket.app.state.services
