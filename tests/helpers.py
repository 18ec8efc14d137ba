import asyncio
import io
import wave
from typing import Dict, List, Optional

import numpy as np
from redis.exceptions import ConnectionError as RedisConnectionError

from langlink.services.core.models import Language

ENGLISH = Language(code="en-US", name="English")
HINDI = Language(code="hi-IN", name="Hindi")


def make_wav(duration_sec: float = 0.05, sample_rate: int = 16000, sampwidth: int = 2) -> bytes:
    frames = int(duration_sec * sample_rate)
    if sampwidth == 2:
        data = (np.sin(np.linspace(0, 40, frames)) * 8000).astype("<i2").tobytes()
    else:
        data = bytes([128] * frames * sampwidth)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(sampwidth)
        wav.setframerate(sample_rate)
        wav.writeframes(data)
    return buf.getvalue()


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class BrokenRedis:
    """Redis client whose every command fails like a dropped connection."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise RedisConnectionError("Connection refused")
        return fail

    def pipeline(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")


class FakeTranslationProvider:
    def __init__(self, translations: Optional[Dict[str, str]] = None, delay: float = 0.0, error: Optional[Exception] = None):
        self.translations = translations or {}
        self.delay = delay
        self.error = error
        self.calls: List[tuple] = []

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        self.calls.append((text, source_language, target_language))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.translations.get(text, f"[{target_language}] {text}")


class FakeSpeechSynthesizer:
    def __init__(self, audio: Optional[bytes] = None, error: Optional[Exception] = None):
        self.audio = make_wav() if audio is None else audio
        self.error = error
        self.calls: List[tuple] = []

    async def synthesize(self, text: str, language_code: Optional[str] = None) -> bytes:
        self.calls.append((text, language_code))
        if self.error is not None:
            raise self.error
        return self.audio


class FakeAudioOutput:
    def __init__(self, decode_error: Optional[Exception] = None, block: bool = False):
        self.decode_error = decode_error
        self.played: List[tuple] = []
        self.stop_calls = 0
        self.release = asyncio.Event() if block else None

    def decode(self, audio: bytes):
        if self.decode_error is not None:
            raise self.decode_error
        return audio

    async def play(self, decoded, volume: float) -> None:
        self.played.append((decoded, volume))
        if self.release is not None:
            await self.release.wait()

    def stop(self) -> None:
        self.stop_calls += 1


class FakeLocalSynthesizer:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.spoken: List[tuple] = []
        self.stop_calls = 0

    async def speak(self, text: str, language_code: str, volume: float, rate: float) -> None:
        self.spoken.append((text, language_code, volume, rate))
        if self.error is not None:
            raise self.error

    def stop(self) -> None:
        self.stop_calls += 1


class FakeRecognizer:
    def __init__(self, transcript: str = "Hello", error: Optional[Exception] = None):
        self.transcript = transcript
        self.error = error
        self.calls: List[tuple] = []

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        self.calls.append((audio, language_code))
        if self.error is not None:
            raise self.error
        return self.transcript
