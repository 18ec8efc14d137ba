"""
GCP Services Package

Exports the remote provider adapters (translation, synthesis, recognition).
"""

from langlink.services.gcp.gemini import GeminiTranslationProvider
from langlink.services.gcp.speech import GCPSpeechRecognizer
from langlink.services.gcp.tts import GCPSpeechSynthesisProvider

__all__ = [
    "GeminiTranslationProvider",
    "GCPSpeechRecognizer",
    "GCPSpeechSynthesisProvider",
]
