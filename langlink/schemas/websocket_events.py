"""
WebSocket event schemas for the debounced input stream (/ws/input).

Client → server:
    {"type": "input", "text": "...", "source": {...}, "target": {...}, "stream": "source"}
    {"type": "network", "online": false}

Server → client:
    {"type": "translation", ...}  latest settled input only
    {"type": "error", "message": "..."}
    {"type": "offline"} / {"type": "online"}
"""
from typing import Literal, Optional

from pydantic import BaseModel

from langlink.config.constants import DEFAULT_INPUT_STREAM
from langlink.schemas.translation import LanguageModel


class WebSocketEventBase(BaseModel):
    type: str


class InputEvent(WebSocketEventBase):
    type: Literal["input"] = "input"
    text: str
    source: LanguageModel
    target: LanguageModel
    stream: str = DEFAULT_INPUT_STREAM


class NetworkEvent(WebSocketEventBase):
    type: Literal["network"] = "network"
    online: bool


class TranslationEvent(WebSocketEventBase):
    type: Literal["translation"] = "translation"
    stream: str
    fingerprint: str
    source_text: str
    translated_text: str
    from_cache: bool


class ErrorEvent(WebSocketEventBase):
    type: Literal["error"] = "error"
    stream: Optional[str] = None
    message: str
