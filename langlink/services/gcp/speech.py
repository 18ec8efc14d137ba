"""
GCP Speech Recognizer

Handles Google Cloud Speech-to-Text for recorded LINEAR16 clips.
"""

import asyncio
import logging
from typing import Optional

from google.cloud import speech

from langlink.config.constants import GCP_STT_SAMPLE_RATE_HZ, GCP_STT_TIMEOUT_SEC
from langlink.services.exceptions import ProviderError
from langlink.services.gcp.credentials import ensure_credentials

logger = logging.getLogger(__name__)


class GCPSpeechRecognizer:
    """Transcribes recorded audio with Google Cloud Speech-to-Text."""

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        sample_rate_hz: int = GCP_STT_SAMPLE_RATE_HZ,
        timeout_sec: float = GCP_STT_TIMEOUT_SEC,
    ):
        self._credentials_path = credentials_path
        self._sample_rate_hz = sample_rate_hz
        self._timeout_sec = timeout_sec
        self._client: Optional[speech.SpeechClient] = None

    def _get_client(self) -> speech.SpeechClient:
        if self._client is None:
            ensure_credentials(self._credentials_path)
            self._client = speech.SpeechClient()
        return self._client

    def _transcribe_sync(self, audio: bytes, language_code: str) -> str:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self._sample_rate_hz,
            language_code=language_code,
            enable_automatic_punctuation=True,
        )
        response = self._get_client().recognize(
            config=config,
            audio=speech.RecognitionAudio(content=audio),
            timeout=self._timeout_sec,
        )
        if not response.results:
            return ""

        return " ".join(
            result.alternatives[0].transcript.strip()
            for result in response.results
            if result.alternatives
        ).strip()

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        """
        Transcribe a recorded clip.

        Returns:
            Transcript text (empty when nothing was recognised)

        Raises:
            ProviderError: if the recognition call fails
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._transcribe_sync, audio, language_code)
        except Exception as e:
            logger.error(f"[GCPSpeechRecognizer] Recognition failed for {language_code}: {e}")
            raise ProviderError(f"Speech recognition failed: {e}") from e
