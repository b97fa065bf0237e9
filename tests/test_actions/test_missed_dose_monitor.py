"""
Tests for Missed Dose Monitor
Periodic missed-dose checks and caretaker alerts
"""

import asyncio
import pytest
from unittest.mock import AsyncMock
from datetime import timedelta

from actions.missed_dose_monitor import MissedDoseMonitor
from services.ledger_service import LedgerService
from tools.blob_store import InMemoryBlobStore
from tools.notification_service import MissedDoseNotifier
from tests import TEST_USER_ID


# ==================== FIXTURES ====================

@pytest.fixture
def notifier():
    return MissedDoseNotifier(recipient="carer@example.com")


@pytest.fixture
def monitor(clock, notifier):
    """Monitor on the fixed 14:00 clock with its own notifier"""
    return MissedDoseMonitor(
        interval=0.01,
        clock=clock,
        notifier=notifier,
        ledger=LedgerService(clock=clock, blob_store=InMemoryBlobStore()),
    )


# ==================== CHECK TESTS ====================

class TestCheckUser:
    """Tests for a single missed-dose check"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_alerts_for_passed_deadlines(self, monitor, db_session, sample_medications):
        alerts = await monitor.check_user(TEST_USER_ID, db=db_session)

        assert sorted(a.medication_name for a in alerts) == ["Lisinopril", "Metformin"]
        assert all(a.recipient == "carer@example.com" for a in alerts)

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_each_missed_dose_alerts_once(self, monitor, db_session, sample_medications):
        await monitor.check_user(TEST_USER_ID, db=db_session)
        again = await monitor.check_user(TEST_USER_ID, db=db_session)

        assert again == []

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_taken_dose_not_alerted(self, monitor, db_session, sample_medications, make_log, clock):
        metformin = sample_medications[0]
        make_log(metformin, clock.today())

        alerts = await monitor.check_user(TEST_USER_ID, db=db_session)

        assert [a.medication_name for a in alerts] == ["Lisinopril"]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_later_deadline_alerts_on_later_check(self, monitor, db_session, sample_medications, clock):
        await monitor.check_user(TEST_USER_ID, db=db_session)

        clock.set(clock.now().replace(hour=21, minute=1))
        alerts = await monitor.check_user(TEST_USER_ID, db=db_session)

        assert [a.medication_name for a in alerts] == ["Atorvastatin"]

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_next_day_alerts_again(self, monitor, db_session, sample_medications, clock):
        await monitor.check_user(TEST_USER_ID, db=db_session)

        clock.set(clock.now() + timedelta(days=1))
        alerts = await monitor.check_user(TEST_USER_ID, db=db_session)

        assert len(alerts) == 2


# ==================== LOOP TESTS ====================

class TestMonitorLoop:
    """Tests for tick, start and stop"""

    @pytest.mark.asyncio
    async def test_tick_continues_after_failure(self, monitor, monkeypatch):
        async def fake_check(user_id, db=None):
            if user_id == "broken":
                raise RuntimeError("store unavailable")
            return []

        monkeypatch.setattr(monitor, "check_user", fake_check)
        monitor.watch("broken")
        monitor.watch(TEST_USER_ID)

        results = await monitor.tick()

        assert results == {TEST_USER_ID: []}

    @pytest.mark.unit
    def test_watch_and_unwatch(self, monitor):
        monitor.watch(TEST_USER_ID)
        monitor.watch(TEST_USER_ID)
        assert monitor._watched == {TEST_USER_ID}

        monitor.unwatch(TEST_USER_ID)
        monitor.unwatch(TEST_USER_ID)
        assert monitor._watched == set()

    @pytest.mark.asyncio
    async def test_start_and_stop(self, monitor, monkeypatch):
        tick = AsyncMock(return_value={})
        monkeypatch.setattr(monitor, "tick", tick)

        monitor.start()
        assert monitor.running
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert tick.await_count >= 1
        assert not monitor.running

    @pytest.mark.asyncio
    async def test_stop_without_start(self, monitor):
        await monitor.stop()
        assert not monitor.running
