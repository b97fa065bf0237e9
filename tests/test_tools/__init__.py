"""
Test Tools Package
Tests for the tools module (clock, sanitization, blob store, notifications)
"""

__all__ = [
    "test_time_window",
    "test_sanitize",
    "test_blob_store",
    "test_notification_service",
]
