from langlink.api.websocket.connections import InputConnections
from langlink.api.websocket.router import router

__all__ = ["InputConnections", "router"]
