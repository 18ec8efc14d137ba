"""LangLink - resilient translation client service."""

__version__ = "1.0.0"
