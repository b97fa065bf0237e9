"""
Missed Dose Monitor
Periodically re-classifies each watched owner's doses and raises simulated
caretaker alerts for doses that became missed since the last tick.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from config import settings
from database import get_db_context
from services.dose_status_service import DoseStatusService, dose_status_service
from services.ledger_service import LedgerService, ledger_service
from services.medication_service import MedicationService, medication_service
from tools.notification_service import EmailAlert, MissedDoseNotifier, missed_dose_notifier
from tools.time_window import Clock, system_clock


logger = logging.getLogger(__name__)


class MissedDoseMonitor:
    """
    Fixed-interval timer loop over watched owners

    Status changes made between ticks are picked up on the next tick, so an
    alert fires at most ``interval`` seconds after a deadline passes.
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        clock: Optional[Clock] = None,
        notifier: Optional[MissedDoseNotifier] = None,
        status_service: Optional[DoseStatusService] = None,
        ledger: Optional[LedgerService] = None,
        medications: Optional[MedicationService] = None
    ):
        self.interval = interval if interval is not None else settings.MISSED_CHECK_INTERVAL_SECONDS
        self.clock = clock or system_clock
        self.notifier = notifier or missed_dose_notifier
        self.status_service = status_service or dose_status_service
        self.ledger = ledger or ledger_service
        self.medications = medications or medication_service
        self._watched: Set[str] = set()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def watch(self, user_id: str) -> None:
        self._watched.add(user_id)

    def unwatch(self, user_id: str) -> None:
        self._watched.discard(user_id)

    async def check_user(self, user_id: str, db=None) -> List[EmailAlert]:
        """Run one missed-dose check for an owner"""
        if db is None:
            with get_db_context() as session:
                return await self.check_user(user_id, db=session)

        medications = await self.medications.get_user_medications(user_id, db=db)
        taken_ids = await self.ledger.todays_taken_ids(user_id, db=db)

        now = self.clock.now()
        classified = self.status_service.classify(medications, taken_ids, now.strftime("%H:%M"))
        missed = self.status_service.newly_missed(
            classified, self.notifier.alerted_ids(user_id, now.date())
        )
        return self.notifier.notify_missed(user_id, missed, now)

    async def tick(self) -> Dict[str, List[EmailAlert]]:
        """Check every watched owner once; one owner's failure does not stop the rest"""
        results = {}
        for user_id in sorted(self._watched):
            try:
                results[user_id] = await self.check_user(user_id)
            except Exception:
                logger.exception(f"Missed-dose check failed for user {user_id}")
        return results

    async def _run(self) -> None:
        logger.info(f"Missed-dose monitor started (every {self.interval}s)")
        while True:
            await self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Missed-dose monitor stopped")


# Singleton instance
missed_dose_monitor = MissedDoseMonitor()
