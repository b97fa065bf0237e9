"""
DoseKeeper Test Suite
=====================

Tests for the DoseKeeper medication adherence core.

Test Structure:
- test_services/: dose status, ledger, stats and medication services
- test_tools/: clock, sanitization, blob store and notification helpers
- test_actions/: missed-dose monitor
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_services/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"

# Common test data
SAMPLE_MEDICATIONS = [
    {"name": "Metformin", "dosage": "500mg", "deadline_time": "08:00"},
    {"name": "Lisinopril", "dosage": "10mg", "deadline_time": "13:30"},
    {"name": "Atorvastatin", "dosage": "20mg", "deadline_time": "21:00"},
]

__all__ = [
    "TEST_DATABASE_URL",
    "TEST_USER_ID",
    "OTHER_USER_ID",
    "SAMPLE_MEDICATIONS",
]
