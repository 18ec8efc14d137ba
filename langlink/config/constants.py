"""
Application-wide constants for configuration and tuning.

This file centralizes the operational parameters of the resilience layer
(cache, scheduler, playback, metrics) and the provider adapters.

Note: Environment-dependent settings (Redis, Google credentials, limits that
deployments tune) belong in settings.py. Values here are the defaults those
settings fall back to and parameters that rarely change between environments.
"""

# ==============================================================================
# TRANSLATION CACHE
# ==============================================================================

# Time-to-live for cached translations (seconds, 7 days)
CACHE_TTL_SEC: float = 7 * 24 * 60 * 60

# Maximum live entries in the translation cache
CACHE_MAX_ENTRIES: int = 500

# ==============================================================================
# REQUEST SCHEDULING
# ==============================================================================

# Quiet period after the last input change before a translation fires (ms)
DEBOUNCE_MS: int = 500

# Input stream used when the caller does not name one
DEFAULT_INPUT_STREAM: str = "default"

# ==============================================================================
# HISTORY & METRICS
# ==============================================================================

# Maximum completed translations kept in history
HISTORY_MAX_ITEMS: int = 50

# Maximum metric events kept in the ring buffer
METRICS_MAX_EVENTS: int = 1000

# ==============================================================================
# STORAGE RECORD NAMES (joined with STORAGE_KEY_PREFIX)
# ==============================================================================

CACHE_RECORD: str = "translation-cache"
CACHE_SEQUENCE_RECORD: str = "translation-cache:seq"
HISTORY_RECORD: str = "history"
METRICS_RECORD: str = "metrics"
PREFERENCES_RECORD: str = "preferences"

# ==============================================================================
# USER PREFERENCES
# ==============================================================================

DEFAULT_VOLUME: float = 1.0
DEFAULT_RATE: float = 1.0

VOLUME_MIN: float = 0.0
VOLUME_MAX: float = 1.0

RATE_MIN: float = 0.5
RATE_MAX: float = 2.0

# ==============================================================================
# GEMINI TRANSLATION (Vertex AI)
# ==============================================================================

# Gemini model to use (flash = fast/cheap)
GEMINI_MODEL_NAME: str = "gemini-2.5-flash"

# Gemini generation parameters
GEMINI_TEMPERATURE: float = 0.1
GEMINI_MAX_OUTPUT_TOKENS: int = 1024
GEMINI_TOP_P: float = 0.8

# Translation call timeout (seconds)
TRANSLATION_TIMEOUT_SEC: float = 15.0

# ==============================================================================
# SPEECH (GCP)
# ==============================================================================

# Text-to-Speech output sample rate (Hz)
GCP_TTS_SAMPLE_RATE_HZ: int = 24000

# TTS pitch offset (0.0 = no change)
TTS_PITCH: float = 0.0

# Text-to-Speech API timeout (seconds)
GCP_TTS_TIMEOUT_SEC: float = 10.0

# Speech-to-Text sample rate (recorded LINEAR16 input)
GCP_STT_SAMPLE_RATE_HZ: int = 16000

# Speech-to-Text API timeout (seconds)
GCP_STT_TIMEOUT_SEC: float = 15.0

# ==============================================================================
# ON-DEVICE SYNTHESIS
# ==============================================================================

# pyttsx3 words-per-minute corresponding to rate 1.0
LOCAL_TTS_BASE_WPM: int = 200

# ==============================================================================
# METRICS & MONITORING
# ==============================================================================

# Prometheus metrics server port
METRICS_SERVER_PORT: int = 8001
