"""
Core Infrastructure Module

This module contains shared infrastructure components used across the services:
- make_fingerprint: cache / dedupe key for a translation request
- Language, TranslationOutcome: shared value types
- RecordStore: access to the durable records in Redis

Usage:
    from langlink.services.core import make_fingerprint, Language, RecordStore
"""

from langlink.services.core.fingerprint import make_fingerprint, normalize_text
from langlink.services.core.models import Language, TranslationOutcome
from langlink.services.core.storage import RecordStore

__all__ = [
    # Fingerprints
    "make_fingerprint",
    "normalize_text",
    # Models
    "Language",
    "TranslationOutcome",
    # Storage
    "RecordStore",
]
