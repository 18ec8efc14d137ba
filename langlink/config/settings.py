from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from langlink.config import constants


class Settings(BaseSettings):
    # Redis (durable key-value store)
    REDIS_HOST: str = Field("localhost")
    REDIS_PORT: int = Field(6379)
    REDIS_PASSWORD: str | None = Field(None)
    REDIS_DB: int = Field(0)
    STORAGE_KEY_PREFIX: str = Field("langlink")

    # Google Cloud
    GOOGLE_APPLICATION_CREDENTIALS: str | None = Field(None)
    GOOGLE_PROJECT_ID: str | None = Field(None)
    VERTEX_AI_LOCATION: str = Field("us-central1")

    # App
    API_HOST: str = Field("127.0.0.1")
    API_PORT: int = Field(8000)
    LOG_LEVEL: str = Field("INFO")
    METRICS_SERVER_ENABLED: bool = Field(False)
    METRICS_SERVER_PORT: int = Field(constants.METRICS_SERVER_PORT)

    # Resilience layer
    CACHE_TTL_SEC: float = Field(constants.CACHE_TTL_SEC)
    CACHE_MAX_ENTRIES: int = Field(constants.CACHE_MAX_ENTRIES)
    DEBOUNCE_MS: int = Field(constants.DEBOUNCE_MS)
    HISTORY_MAX_ITEMS: int = Field(constants.HISTORY_MAX_ITEMS)
    METRICS_MAX_EVENTS: int = Field(constants.METRICS_MAX_EVENTS)
    DEFAULT_TTS_LANGUAGE: str = Field("en-US")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


def get_settings() -> Settings:
    """Build settings from the environment (and `.env` if present)."""
    return Settings()
