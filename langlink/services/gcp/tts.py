"""
GCP Text-to-Speech Provider

Handles Google Cloud Text-to-Speech operations for the remote playback path.
"""

import asyncio
import logging
from typing import Optional

from google.cloud import texttospeech

from langlink.config.constants import GCP_TTS_SAMPLE_RATE_HZ, GCP_TTS_TIMEOUT_SEC, TTS_PITCH
from langlink.services.exceptions import ProviderError
from langlink.services.gcp.credentials import ensure_credentials

logger = logging.getLogger(__name__)


class GCPSpeechSynthesisProvider:
    """Synthesizes WAV (LINEAR16) audio with Google Cloud Text-to-Speech."""

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        default_language_code: str = "en-US",
        timeout_sec: float = GCP_TTS_TIMEOUT_SEC,
    ):
        self._credentials_path = credentials_path
        self._default_language_code = default_language_code
        self._timeout_sec = timeout_sec
        self._client: Optional[texttospeech.TextToSpeechClient] = None

    def _get_client(self) -> texttospeech.TextToSpeechClient:
        if self._client is None:
            ensure_credentials(self._credentials_path)
            self._client = texttospeech.TextToSpeechClient()
        return self._client

    def _synthesize_sync(self, text: str, language_code: str) -> bytes:
        voice_params = texttospeech.VoiceSelectionParams(language_code=language_code)

        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.LINEAR16,
            sample_rate_hertz=GCP_TTS_SAMPLE_RATE_HZ,
            speaking_rate=1.0,
            pitch=TTS_PITCH,
        )

        synthesis_input = texttospeech.SynthesisInput(text=text)

        response = self._get_client().synthesize_speech(
            input=synthesis_input,
            voice=voice_params,
            audio_config=audio_config,
            timeout=self._timeout_sec,
        )
        return response.audio_content

    async def synthesize(self, text: str, language_code: Optional[str] = None) -> bytes:
        """
        Synthesize text to WAV audio.

        Raises:
            ProviderError: if the call fails or no audio payload is returned
        """
        language_code = language_code or self._default_language_code
        loop = asyncio.get_running_loop()
        try:
            audio = await loop.run_in_executor(None, self._synthesize_sync, text, language_code)
        except Exception as e:
            logger.error(f"[GCPSpeechSynthesis] Synthesis failed for {language_code}: {e}")
            raise ProviderError(f"Speech synthesis failed: {e}") from e

        if not audio:
            raise ProviderError("No audio data received from speech synthesis")
        return audio
