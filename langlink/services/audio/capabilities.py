"""
Runtime capability detection for on-device speech synthesis.

A capability is either Available (carrying the engine to use) or
Unavailable (carrying the reason). It is detected once at startup and
queried explicitly by consumers.
"""
import logging
from dataclasses import dataclass
from typing import Union

from langlink.services.protocols import LocalSpeechSynthesizerProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Available:
    synthesizer: LocalSpeechSynthesizerProtocol


@dataclass(frozen=True)
class Unavailable:
    reason: str


SynthesisCapability = Union[Available, Unavailable]


def detect_local_synthesis() -> SynthesisCapability:
    """Probe the runtime for an on-device speech engine (pyttsx3)."""
    from langlink.services.audio.local_tts import Pyttsx3Synthesizer

    try:
        synthesizer = Pyttsx3Synthesizer.create()
    except Exception as e:
        logger.warning(f"[Capabilities] On-device speech synthesis unavailable: {e}")
        return Unavailable(reason=str(e) or type(e).__name__)

    logger.info("[Capabilities] On-device speech synthesis available (pyttsx3)")
    return Available(synthesizer=synthesizer)
