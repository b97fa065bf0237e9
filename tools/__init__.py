"""
Tools Module
Clock, sanitization, blob storage and notification helpers
"""

from .time_window import (
    Clock,
    FixedClock,
    parse_time_of_day,
    normalize_deadline,
    format_time_12h,
    format_time_display,
    system_clock,
)

from .sanitize import (
    strip_html,
    sanitize_text,
    sanitize_medication_name,
    sanitize_dosage,
    sanitize_notes,
    sanitize_time,
)

from .blob_store import (
    BlobStore,
    LocalBlobStore,
    InMemoryBlobStore,
    ProofUpload,
    blob_store,
)

from .notification_service import (
    EmailAlert,
    MissedDoseNotifier,
    missed_dose_notifier,
)


__all__ = [
    # Time window
    "Clock",
    "FixedClock",
    "parse_time_of_day",
    "normalize_deadline",
    "format_time_12h",
    "format_time_display",
    "system_clock",

    # Sanitization
    "strip_html",
    "sanitize_text",
    "sanitize_medication_name",
    "sanitize_dosage",
    "sanitize_notes",
    "sanitize_time",

    # Blob storage
    "BlobStore",
    "LocalBlobStore",
    "InMemoryBlobStore",
    "ProofUpload",
    "blob_store",

    # Notifications
    "EmailAlert",
    "MissedDoseNotifier",
    "missed_dose_notifier",
]
