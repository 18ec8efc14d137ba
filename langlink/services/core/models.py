"""
Shared value types of the resilience layer.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A supported language: `code` identifies it, `name` is shown to providers."""
    code: str
    name: str


@dataclass(frozen=True)
class TranslationOutcome:
    """
    Result of one translation request.

    Attributes:
        fingerprint: Fingerprint of the request ("" for blank input)
        source_text: Input text as submitted
        translated_text: Translation ("" for blank input)
        from_cache: True when served from the translation cache
    """
    fingerprint: str
    source_text: str
    translated_text: str
    from_cache: bool = False

    @classmethod
    def empty(cls, source_text: str = "") -> "TranslationOutcome":
        return cls(fingerprint="", source_text=source_text, translated_text="")
