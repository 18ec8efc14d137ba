from typing import List, Optional
from pydantic import BaseModel, Field

from langlink.services.core.models import Language


class LanguageModel(BaseModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    def to_language(self) -> Language:
        return Language(code=self.code, name=self.name)


class TranslateRequest(BaseModel):
    text: str
    source: LanguageModel
    target: LanguageModel


class TranslationResponse(BaseModel):
    fingerprint: str
    source_text: str
    translated_text: str
    from_cache: bool


class HistoryItemResponse(BaseModel):
    id: str
    source_language: LanguageModel
    target_language: LanguageModel
    source_text: str
    translated_text: str
    timestamp: float


class HistoryResponse(BaseModel):
    items: List[HistoryItemResponse]
    max_items: int


class CacheStatsResponse(BaseModel):
    hits: int
    misses: int
    hit_rate_percent: float
    cache_size: int
    max_size: int


class SpeechTranscriptionResponse(BaseModel):
    transcript: str
    translation: Optional[TranslationResponse] = None
