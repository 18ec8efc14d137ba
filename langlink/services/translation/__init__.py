"""
Translation Module

This module contains the translation side of the resilience layer:
- TranslationCache: TTL + capacity bounded cache of translations
- TranslationService: cache-first translation with metrics and history
- RequestScheduler: debounce + single-flight request scheduling

Usage:
    from langlink.services.translation import RequestScheduler, TranslationService
"""

from langlink.services.translation.cache import CacheEntry, TranslationCache
from langlink.services.translation.service import TranslationService
from langlink.services.translation.scheduler import RequestScheduler

__all__ = [
    # Cache
    "CacheEntry",
    "TranslationCache",
    # Service
    "TranslationService",
    # Scheduling
    "RequestScheduler",
]
