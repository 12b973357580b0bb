"""
Redaction helpers for phone-style identifiers before they reach logs.

Provides:
- redact(): stable hash for correlating events without exposing the number
- mask_identifier(): human-readable mask that keeps the last four digits
- digits_only(): normalization used when comparing account identifiers
"""

from __future__ import annotations

import re
from hashlib import sha256

_NON_DIGIT = re.compile(r"[^\d]")


def redact(value: str | None) -> str:
    """
    Return a stable hash representation of a sensitive string.
    """
    if not value:
        return "hash:missing"
    digest = sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"hash:{digest}"


def mask_identifier(identifier: str | None, visible: int = 4) -> str:
    """
    Mask all but the trailing digits of a phone-style identifier.

    Example:
        "15551234567" -> "*******4567"
    """
    if not identifier:
        return "(unknown)"
    if len(identifier) <= visible:
        return identifier
    return "*" * (len(identifier) - visible) + identifier[-visible:]


def digits_only(value: str | None) -> str:
    """Strip everything but digits ("15551234567@c.us" -> "15551234567")."""
    return _NON_DIGIT.sub("", value or "")
