"""
Audio output through sounddevice.

Remote synthesis returns WAV (LINEAR16) bytes. They are decoded into a
float32 numpy array and played on the default output device with the
user's volume applied as gain.
"""
import asyncio
import io
import logging
import wave
from dataclasses import dataclass

import numpy as np

from langlink.services.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class DecodedAudio:
    samples: np.ndarray
    sample_rate: int

    @property
    def duration_sec(self) -> float:
        return len(self.samples) / float(self.sample_rate) if self.sample_rate else 0.0


def decode_wav(audio: bytes) -> DecodedAudio:
    """
    Decode 16-bit PCM WAV bytes.

    Raises:
        ProviderError: if the payload is empty or not 16-bit PCM WAV
    """
    if not audio:
        raise ProviderError("No audio payload to decode")
    try:
        with wave.open(io.BytesIO(audio), "rb") as wav:
            if wav.getsampwidth() != 2:
                raise ProviderError(f"Unsupported sample width: {wav.getsampwidth()} bytes")
            channels = wav.getnchannels()
            sample_rate = wav.getframerate()
            frames = wav.readframes(wav.getnframes())
    except (wave.Error, EOFError) as e:
        raise ProviderError(f"Failed to decode audio: {e}") from e

    samples = np.frombuffer(frames, dtype="<i2").astype(np.float32) / 32768.0
    if channels > 1:
        samples = samples.reshape(-1, channels)
    if samples.size == 0:
        raise ProviderError("Decoded audio contains no samples")
    return DecodedAudio(samples=samples, sample_rate=sample_rate)


class SoundDeviceOutput:
    """Plays decoded audio on the default output device."""

    def decode(self, audio: bytes) -> DecodedAudio:
        return decode_wav(audio)

    def _play_sync(self, decoded: DecodedAudio, volume: float):
        import sounddevice as sd

        sd.play(decoded.samples * float(volume), decoded.sample_rate)
        sd.wait()

    async def play(self, decoded: DecodedAudio, volume: float) -> None:
        """Play audio and return once playback has ended."""
        logger.debug(f"[AudioOutput] Playing {decoded.duration_sec:.2f}s at volume {volume:.2f}")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._play_sync, decoded, volume)

    def stop(self) -> None:
        import sounddevice as sd

        sd.stop()
