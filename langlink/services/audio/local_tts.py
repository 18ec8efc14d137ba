"""
On-device text-to-speech using pyttsx3 (SAPI5 / NSSpeechSynthesizer / eSpeak).

The engine is blocking, so utterances run in the default thread pool. The
voice is chosen by language code when the platform exposes a matching voice.
"""
import asyncio
import logging
from typing import Any, Optional

from langlink.config.constants import LOCAL_TTS_BASE_WPM

logger = logging.getLogger(__name__)


def _voice_languages(voice: Any) -> list:
    languages = []
    for lang in getattr(voice, "languages", None) or []:
        if isinstance(lang, bytes):
            # eSpeak reports e.g. b"\x05en-us"
            lang = lang.decode("utf-8", errors="ignore").lstrip("\x00\x01\x02\x03\x04\x05")
        languages.append(str(lang).lower().replace("_", "-"))
    return languages


class Pyttsx3Synthesizer:
    """Speaks text with the platform's native voices."""

    def __init__(self, engine: Any):
        self._engine = engine

    @classmethod
    def create(cls) -> "Pyttsx3Synthesizer":
        """Initialise the platform engine; raises if none is installed."""
        import pyttsx3

        return cls(pyttsx3.init())

    def _select_voice(self, language_code: str) -> Optional[str]:
        wanted = language_code.lower().replace("_", "-")
        primary = wanted.split("-")[0]
        fallback = None
        for voice in self._engine.getProperty("voices") or []:
            languages = _voice_languages(voice)
            if wanted in languages:
                return voice.id
            if fallback is None and any(lang.split("-")[0] == primary for lang in languages):
                fallback = voice.id
        return fallback

    def _speak_sync(self, text: str, language_code: str, volume: float, rate: float):
        voice_id = self._select_voice(language_code)
        if voice_id is not None:
            self._engine.setProperty("voice", voice_id)
        else:
            logger.debug(f"[LocalTTS] No device voice for {language_code}, using default voice")
        self._engine.setProperty("volume", volume)
        self._engine.setProperty("rate", int(LOCAL_TTS_BASE_WPM * rate))
        self._engine.say(text)
        self._engine.runAndWait()

    async def speak(self, text: str, language_code: str, volume: float, rate: float) -> None:
        """Speak text and return once the utterance has finished."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._speak_sync, text, language_code, volume, rate)

    def stop(self) -> None:
        self._engine.stop()
