"""
Service container - every component constructed once and wired by injection.

Usage:
    services = build_services(settings, redis_client)
    await services.load()
    outcome = await services.scheduler.translate_now("Hello", english, hindi)
"""
import logging
from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis

from langlink.config.settings import Settings
from langlink.services.audio.arbiter import AudioPlaybackArbiter
from langlink.services.audio.capabilities import SynthesisCapability, detect_local_synthesis
from langlink.services.core.storage import RecordStore
from langlink.services.history import HistoryStore
from langlink.services.metrics import MetricsRecorder
from langlink.services.network import NetworkModeMonitor
from langlink.services.preferences import PreferencesStore
from langlink.services.protocols import (
    AudioOutputProtocol,
    SpeechRecognizerProtocol,
    SpeechSynthesisProviderProtocol,
    TranslationProviderProtocol,
)
from langlink.services.speech.recognition import RecognitionService
from langlink.services.translation.cache import TranslationCache
from langlink.services.translation.scheduler import RequestScheduler
from langlink.services.translation.service import TranslationService

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    settings: Settings
    store: RecordStore
    network: NetworkModeMonitor
    cache: TranslationCache
    history: HistoryStore
    metrics: MetricsRecorder
    preferences: PreferencesStore
    translation: TranslationService
    scheduler: RequestScheduler
    arbiter: AudioPlaybackArbiter
    recognition: RecognitionService
    local_synthesis: SynthesisCapability

    async def load(self):
        """
        Load the persisted records.

        Each store handles its own storage failures, so one unreadable record
        never keeps the others from loading.
        """
        await self.history.load()
        await self.metrics.load()
        await self.preferences.load()
        logger.info("[Services] Persisted state loaded")

    async def shutdown(self):
        await self.scheduler.shutdown()
        self.arbiter.stop()


def build_services(
    settings: Settings,
    redis_client: redis.Redis,
    translation_provider: Optional[TranslationProviderProtocol] = None,
    synthesizer: Optional[SpeechSynthesisProviderProtocol] = None,
    recognizer: Optional[SpeechRecognizerProtocol] = None,
    output: Optional[AudioOutputProtocol] = None,
    local_synthesis: Optional[SynthesisCapability] = None,
) -> AppServices:
    """
    Construct the service graph.

    Collaborators left as None get their default (GCP / Vertex AI / device)
    implementation.
    """
    if translation_provider is None:
        from langlink.services.gcp.gemini import GeminiTranslationProvider
        translation_provider = GeminiTranslationProvider(
            project_id=settings.GOOGLE_PROJECT_ID,
            location=settings.VERTEX_AI_LOCATION,
            credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
        )
    if synthesizer is None:
        from langlink.services.gcp.tts import GCPSpeechSynthesisProvider
        synthesizer = GCPSpeechSynthesisProvider(
            credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
            default_language_code=settings.DEFAULT_TTS_LANGUAGE,
        )
    if recognizer is None:
        from langlink.services.gcp.speech import GCPSpeechRecognizer
        recognizer = GCPSpeechRecognizer(credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS)
    if output is None:
        from langlink.services.audio.output import SoundDeviceOutput
        output = SoundDeviceOutput()
    if local_synthesis is None:
        local_synthesis = detect_local_synthesis()

    store = RecordStore(redis_client, prefix=settings.STORAGE_KEY_PREFIX)
    network = NetworkModeMonitor()
    metrics = MetricsRecorder(store, capacity=settings.METRICS_MAX_EVENTS, network=network.status)
    cache = TranslationCache(store, ttl_seconds=settings.CACHE_TTL_SEC, max_entries=settings.CACHE_MAX_ENTRIES)
    history = HistoryStore(store, max_items=settings.HISTORY_MAX_ITEMS)
    preferences = PreferencesStore(store)

    translation = TranslationService(translation_provider, cache, metrics, history)
    scheduler = RequestScheduler(
        translation,
        network.status,
        debounce_seconds=settings.DEBOUNCE_MS / 1000.0,
    )
    arbiter = AudioPlaybackArbiter(
        synthesizer,
        output,
        local_synthesis,
        network.status,
        metrics,
        preferences,
    )
    recognition = RecognitionService(recognizer, scheduler, network.status, metrics)

    return AppServices(
        settings=settings,
        store=store,
        network=network,
        cache=cache,
        history=history,
        metrics=metrics,
        preferences=preferences,
        translation=translation,
        scheduler=scheduler,
        arbiter=arbiter,
        recognition=recognition,
        local_synthesis=local_synthesis,
    )
