"""
Pytest Configuration and Shared Fixtures
========================================

Shared fixtures for the DoseKeeper tests: an in-memory database, a frozen
clock, an in-memory blob store, sample medications and an API client.
"""

import os
import sys
from datetime import datetime, timedelta
from typing import Callable, Generator, List

# Settings are read at import time; configure before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("MONITOR_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, get_db
from models import Medication, MedicationLog, LogStatus
from tools.blob_store import InMemoryBlobStore
from tools.notification_service import missed_dose_notifier
from tools.time_window import FixedClock, system_clock
from services.ledger_service import ledger_service
from actions.missed_dose_monitor import missed_dose_monitor
from tests import TEST_USER_ID, SAMPLE_MEDICATIONS
from app import app


# Wednesday afternoon
FIXED_NOW = datetime(2024, 3, 13, 14, 0, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==================== CLOCK & STORAGE FIXTURES ====================

@pytest.fixture
def clock() -> FixedClock:
    """Standalone clock frozen at FIXED_NOW"""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def frozen_system_clock(monkeypatch) -> FixedClock:
    """
    Freeze the process-wide clock used by the service singletons.
    Returns a FixedClock whose ``set()`` moves every singleton's "now".
    """
    fixed = FixedClock(FIXED_NOW)
    monkeypatch.setattr(system_clock, "_now_fn", fixed.now)
    return fixed


@pytest.fixture
def memory_blob_store(monkeypatch) -> InMemoryBlobStore:
    """In-memory blob store wired into the ledger singleton"""
    store = InMemoryBlobStore()
    monkeypatch.setattr(ledger_service, "blob_store", store)
    return store


@pytest.fixture(autouse=True)
def reset_alert_state():
    """Notifier and monitor singletons keep state between calls"""
    missed_dose_notifier.reset()
    yield
    missed_dose_notifier.reset()
    for user_id in list(missed_dose_monitor._watched):
        missed_dose_monitor.unwatch(user_id)


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def make_medication(db_session: Session) -> Callable[..., Medication]:
    """Factory creating medications with increasing created_at"""
    counter = {"n": 0}

    def _make(
        name: str = "Metformin",
        dosage: str = "500mg",
        deadline_time: str = "08:00",
        user_id: str = TEST_USER_ID,
        notes: str = None,
        **extra
    ) -> Medication:
        counter["n"] += 1
        medication = Medication(
            user_id=user_id,
            name=name,
            dosage=dosage,
            deadline_time=deadline_time,
            notes=notes,
            created_at=extra.pop("created_at", FIXED_NOW - timedelta(days=60) + timedelta(minutes=counter["n"])),
            **extra
        )
        db_session.add(medication)
        db_session.commit()
        db_session.refresh(medication)
        return medication

    return _make


@pytest.fixture
def sample_medications(make_medication) -> List[Medication]:
    """Three medications for TEST_USER_ID, deadlines 08:00 / 13:30 / 21:00"""
    return [make_medication(**data) for data in SAMPLE_MEDICATIONS]


@pytest.fixture
def make_log(db_session: Session) -> Callable[..., MedicationLog]:
    """Factory inserting a taken log directly"""

    def _make(medication: Medication, taken_date, user_id: str = None, photo_url: str = None) -> MedicationLog:
        log = MedicationLog(
            medication_id=medication.id,
            user_id=user_id or medication.user_id,
            taken_date=taken_date,
            status=LogStatus.TAKEN,
            photo_url=photo_url,
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== API FIXTURES ====================

@pytest.fixture(scope="function")
def client(db_session: Session, frozen_system_clock, memory_blob_store) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"X-User-Id": TEST_USER_ID}


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
