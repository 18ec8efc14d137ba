"""
Audio Module

This module contains the playback side of the resilience layer:
- AudioPlaybackArbiter: single active playback, remote → on-device fallback
- SoundDeviceOutput: WAV decode + device playback
- Pyttsx3Synthesizer / detect_local_synthesis: on-device synthesis capability

Usage:
    from langlink.services.audio import AudioPlaybackArbiter, PlaybackSide
"""

from langlink.services.audio.arbiter import (
    AudioPlaybackArbiter,
    PlaybackPath,
    PlaybackResult,
    PlaybackSide,
)
from langlink.services.audio.capabilities import (
    Available,
    SynthesisCapability,
    Unavailable,
    detect_local_synthesis,
)
from langlink.services.audio.output import DecodedAudio, SoundDeviceOutput, decode_wav

__all__ = [
    # Arbiter
    "AudioPlaybackArbiter",
    "PlaybackPath",
    "PlaybackResult",
    "PlaybackSide",
    # Capabilities
    "Available",
    "Unavailable",
    "SynthesisCapability",
    "detect_local_synthesis",
    # Output
    "DecodedAudio",
    "SoundDeviceOutput",
    "decode_wav",
]
