"""
Request fingerprints.

Two translation requests with the same fingerprint are semantically identical
and share cache and in-flight state.

Normalization policy: surrounding whitespace is trimmed and internal runs of
whitespace collapse to a single space. Case is preserved, so "Hello" and
"hello" are different requests.
"""
import hashlib
import json
import re

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize input text for fingerprinting."""
    return _WHITESPACE.sub(" ", text.strip())


def make_fingerprint(text: str, source_language_id: str, target_language_id: str) -> str:
    """
    Compute the fingerprint of a translation request.

    Args:
        text: Raw input text
        source_language_id: Source language identifier (e.g., "en-US")
        target_language_id: Target language identifier (e.g., "hi-IN")

    Returns:
        64-character hex digest
    """
    # JSON keeps the three parts unambiguous when the text contains separators
    key_str = json.dumps([normalize_text(text), source_language_id, target_language_id], ensure_ascii=False)
    return hashlib.sha256(key_str.encode("utf-8")).hexdigest()
