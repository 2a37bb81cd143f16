# src/cache/fingerprint.py - v4
"""Content fingerprint used as the staleness key of a cached annotation.

The digest is only ever compared for equality against the one stored in a
cache entry. It is an HMAC-SHA256 keyed with a fixed salt so that digests
match the ``sha1`` values already present in published cache files.
"""

from __future__ import annotations

import hashlib
import hmac

FINGERPRINT_KEY = b"chatluna"


def compute_fingerprint(text: str) -> str:
    """Return the hex fingerprint of a preset's raw text."""
    return hmac.new(FINGERPRINT_KEY, text.encode("utf-8"), hashlib.sha256).hexdigest()


def is_fresh(stored: str | None, text: str) -> bool:
    """Whether a stored fingerprint still matches the given text."""
    if not stored:
        return False
    return stored == compute_fingerprint(text)
