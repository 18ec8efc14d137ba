from typing import Literal, Optional
from pydantic import BaseModel, Field

from langlink.schemas.translation import LanguageModel


class NetworkStatusResponse(BaseModel):
    mode: Literal["online", "offline"]
    online: bool


class PreferencesModel(BaseModel):
    volume: float
    rate: float


class PreferencesUpdate(BaseModel):
    volume: Optional[float] = Field(None, ge=0.0, le=1.0)
    rate: Optional[float] = Field(None, ge=0.5, le=2.0)


class PlaybackRequest(BaseModel):
    text: str = Field(..., min_length=1)
    language: LanguageModel
    side: Literal["source", "target"] = "target"


class PlaybackResponse(BaseModel):
    side: str
    path: Optional[str] = None
    fallback_reason: Optional[str] = None
    stopped: bool = False


class PlaybackStopResponse(BaseModel):
    stopped: bool
