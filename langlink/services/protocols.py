"""
Protocol definitions for the collaborators the resilience layer consumes.

This module defines interfaces (Python Protocols) that allow:
- Swapping implementations (e.g., Vertex AI Gemini → another LLM)
- Testing without real API credentials or audio devices
- Clear contracts between components

Usage:
    from langlink.services.protocols import TranslationProviderProtocol

    async def run(provider: TranslationProviderProtocol):
        text = await provider.translate("Hello", "English", "Hindi")
"""

from typing import Any, Optional, Protocol


class TranslationProviderProtocol(Protocol):
    """
    Interface for remote translation providers.

    Implementations raise ProviderError on any failed call or empty response.
    """

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        """
        Translate text between two languages.

        Args:
            text: Text to translate
            source_language: Source language name (e.g., "English")
            target_language: Target language name (e.g., "Hindi")

        Returns:
            Translated text (never empty)
        """
        ...


class SpeechSynthesisProviderProtocol(Protocol):
    """
    Interface for remote (high-fidelity) text-to-speech providers.

    Implementations raise ProviderError when no audio payload is returned.
    """

    async def synthesize(self, text: str, language_code: Optional[str] = None) -> bytes:
        """
        Synthesize speech from text.

        Args:
            text: Text to synthesize
            language_code: Optional language code (e.g., "hi-IN")

        Returns:
            Encoded audio bytes (WAV)
        """
        ...


class SpeechRecognizerProtocol(Protocol):
    """Interface for remote speech-to-text providers."""

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        """Transcribe recorded LINEAR16 audio to text."""
        ...


class LocalSpeechSynthesizerProtocol(Protocol):
    """
    Interface for on-device speech synthesis.

    Completion of the coroutine is the completion signal of the utterance.
    """

    async def speak(self, text: str, language_code: str, volume: float, rate: float) -> None:
        """Speak text aloud with the device voice for language_code."""
        ...

    def stop(self) -> None:
        """Interrupt the current utterance, if any."""
        ...


class AudioOutputProtocol(Protocol):
    """Interface for decoding and playing synthesized audio."""

    def decode(self, audio: bytes) -> Any:
        """Decode encoded audio; raises ProviderError on undecodable input."""
        ...

    async def play(self, decoded: Any, volume: float) -> None:
        """Play decoded audio, completing when playback has ended."""
        ...

    def stop(self) -> None:
        """Stop the current playback, if any."""
        ...
