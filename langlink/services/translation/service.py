"""
Translation Service - cache-first translation of one request.

Flow for a request:
1. Blank input → empty outcome, no provider call
2. Cache hit → cached translation
3. Cache miss → provider call timed as the `translation` stage
4. Success → write through the cache and append to history

Cache, metrics and history failures never change the outcome: those stores
log and swallow their own storage errors. Provider failures propagate as
ProviderError for the caller to surface.
"""
import logging

from langlink.services.core.fingerprint import make_fingerprint, normalize_text
from langlink.services.core.models import Language, TranslationOutcome
from langlink.services.exceptions import ProviderError
from langlink.services.history import HistoryItem, HistoryStore
from langlink.services.metrics import MetricsRecorder, MetricStage
from langlink.services.protocols import TranslationProviderProtocol
from langlink.services.translation.cache import TranslationCache

logger = logging.getLogger(__name__)


class TranslationService:
    """Cache-first translation with latency metrics and history."""

    def __init__(
        self,
        provider: TranslationProviderProtocol,
        cache: TranslationCache,
        metrics: MetricsRecorder,
        history: HistoryStore,
    ):
        self._provider = provider
        self._cache = cache
        self._metrics = metrics
        self._history = history

    async def translate(self, text: str, source: Language, target: Language) -> TranslationOutcome:
        """
        Translate text, consulting the cache first.

        Args:
            text: Input text
            source: Source language
            target: Target language

        Returns:
            TranslationOutcome (from_cache=True on a cache hit)

        Raises:
            ProviderError: if the provider failed or returned nothing
        """
        normalized = normalize_text(text)
        if not normalized:
            return TranslationOutcome.empty(text)

        fingerprint = make_fingerprint(text, source.code, target.code)

        entry = await self._cache.get(fingerprint)
        if entry is not None:
            return TranslationOutcome(
                fingerprint=fingerprint,
                source_text=normalized,
                translated_text=entry.result_text,
                from_cache=True,
            )

        async def call_provider() -> str:
            result = await self._provider.translate(normalized, source.name, target.name)
            if not result or not result.strip():
                raise ProviderError("Translation provider returned an empty result")
            return result.strip()

        translated = await self._metrics.measure(
            MetricStage.TRANSLATION,
            call_provider,
            metadata={"source": source.code, "target": target.code, "chars": len(normalized)},
        )
        logger.info(
            f"[TranslationService] Translated {len(normalized)} chars {source.code} -> {target.code}"
        )

        await self._cache.put(fingerprint, translated)
        await self._history.append(HistoryItem.create(source, target, normalized, translated))

        return TranslationOutcome(
            fingerprint=fingerprint,
            source_text=normalized,
            translated_text=translated,
            from_cache=False,
        )
