"""
Input sanitization for user-entered medication data.
Strips markup and bounds length before anything reaches the store.
"""

import re
from typing import Optional

from config import sanitize_limits


_TAG_RE = re.compile(r"<[^>]*>")
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE)
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def strip_html(value: str) -> str:
    """Remove tags, ``javascript:`` schemes and inline handlers, then trim"""
    value = _TAG_RE.sub("", value)
    value = _JS_SCHEME_RE.sub("", value)
    value = _EVENT_HANDLER_RE.sub("", value)
    return value.strip()


def sanitize_text(value: Optional[str], max_length: int = sanitize_limits.TEXT) -> str:
    if not isinstance(value, str):
        return ""
    return strip_html(value)[:max_length]


def sanitize_medication_name(name: Optional[str]) -> str:
    return sanitize_text(name, sanitize_limits.NAME)


def sanitize_dosage(dosage: Optional[str]) -> str:
    return sanitize_text(dosage, sanitize_limits.DOSAGE)


def sanitize_notes(notes: Optional[str]) -> str:
    if not notes:
        return ""
    return sanitize_text(notes, sanitize_limits.NOTES)


def sanitize_time(value: Optional[str]) -> str:
    """
    Coerce ``H:MM`` / ``HH:MM:SS`` input into ``HH:MM``.

    Out-of-range parts are clamped (``25:70`` -> ``23:59``); input that does
    not look like a time at all yields an empty string.
    """
    if not isinstance(value, str):
        return ""
    match = _TIME_RE.match(value.strip())
    if not match:
        return ""
    hour = min(23, max(0, int(match.group(1))))
    minute = min(59, max(0, int(match.group(2))))
    return f"{hour:02d}:{minute:02d}"
