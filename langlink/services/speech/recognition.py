"""
Recognition Service - recorded speech in, text (and translation) out.

transcribe() is timed as the `speech-to-text` stage; transcribe_and_translate()
wraps recognition plus translation and is additionally timed as `pipeline`.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from langlink.services.core.models import Language, TranslationOutcome
from langlink.services.exceptions import NetworkUnavailableError, UnsupportedCapabilityError
from langlink.services.metrics import MetricsRecorder, MetricStage
from langlink.services.network import NetworkStatus
from langlink.services.protocols import SpeechRecognizerProtocol
from langlink.services.translation.scheduler import RequestScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    transcript: str
    outcome: TranslationOutcome


class RecognitionService:
    """Speech input for the source panel."""

    def __init__(
        self,
        recognizer: Optional[SpeechRecognizerProtocol],
        scheduler: RequestScheduler,
        network: NetworkStatus,
        metrics: MetricsRecorder,
    ):
        self._recognizer = recognizer
        self._scheduler = scheduler
        self._network = network
        self._metrics = metrics

    @property
    def available(self) -> bool:
        return self._recognizer is not None

    def _check_ready(self):
        if self._recognizer is None:
            raise UnsupportedCapabilityError("Speech recognition is not configured")
        if self._network.is_offline:
            raise NetworkUnavailableError("Speech recognition is unavailable while offline")

    async def transcribe(self, audio: bytes, language: Language) -> str:
        """
        Transcribe a recorded clip in the given language.

        Raises:
            NetworkUnavailableError: when offline
            UnsupportedCapabilityError: when no recognizer is configured
            ProviderError: if recognition failed
        """
        self._check_ready()

        transcript = await self._metrics.measure(
            MetricStage.SPEECH_TO_TEXT,
            lambda: self._recognizer.transcribe(audio, language.code),
            metadata={"language": language.code, "bytes": len(audio)},
        )
        logger.info(f"[Recognition] Transcribed {len(audio)} bytes → {len(transcript)} chars")
        return transcript

    async def transcribe_and_translate(
        self,
        audio: bytes,
        source: Language,
        target: Language,
    ) -> PipelineResult:
        """
        Transcribe a clip and translate the transcript immediately.

        Offline and unconfigured requests fail before timing starts, so they
        are not recorded as pipeline errors.
        """
        self._check_ready()

        async def run() -> PipelineResult:
            transcript = await self.transcribe(audio, source)
            outcome = await self._scheduler.translate_now(transcript, source, target)
            return PipelineResult(transcript=transcript, outcome=outcome)

        return await self._metrics.measure(
            MetricStage.PIPELINE,
            run,
            metadata={"source": source.code, "target": target.code},
        )
