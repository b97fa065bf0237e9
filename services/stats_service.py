"""
Stats Service
Rolls daily medication logs up into day, week and period adherence.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from sqlalchemy.orm import Session

from config import settings
from database import get_db_context
import models
from tools.time_window import Clock, system_clock


logger = logging.getLogger(__name__)


@dataclass
class DayBucket:
    taken: int = 0
    total: int = 0

    @property
    def fully_taken(self) -> bool:
        return self.total > 0 and self.taken == self.total


@dataclass
class WeeklyAdherence:
    """Taken/total dose counts for the week starting on ``week_start`` (a Monday)"""
    week_start: date
    taken: int
    total: int


@dataclass
class AdherenceStats:
    total_days: int = 0
    taken_days: int = 0
    missed_days: int = 0
    adherence_rate: int = 0
    weekly_data: List[WeeklyAdherence] = field(default_factory=list)


def week_start(day: date) -> date:
    """Monday of the week containing ``day`` (Sunday belongs to the previous Monday)"""
    return day - timedelta(days=day.weekday())


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def aggregate_daily(
    days: Sequence[date],
    taken_dates: Iterable[date],
    medication_count: int
) -> AdherenceStats:
    """
    Fold taken-log dates into adherence statistics

    Every day gets ``medication_count`` as its total, regardless of when each
    medication was created. Dates without a bucket are ignored.
    """
    buckets: Dict[date, DayBucket] = {
        day: DayBucket(taken=0, total=medication_count) for day in days
    }

    for taken_date in taken_dates:
        bucket = buckets.get(taken_date)
        if bucket is not None:
            bucket.taken += 1

    weeks: Dict[date, DayBucket] = {}
    for day, bucket in buckets.items():
        week = weeks.setdefault(week_start(day), DayBucket())
        week.taken += bucket.taken
        week.total += bucket.total

    total_days = len(buckets)
    taken_days = sum(1 for b in buckets.values() if b.fully_taken)

    return AdherenceStats(
        total_days=total_days,
        taken_days=taken_days,
        missed_days=total_days - taken_days,
        adherence_rate=round_half_up(taken_days / total_days * 100) if total_days else 0,
        weekly_data=[
            WeeklyAdherence(week_start=start, taken=w.taken, total=w.total)
            for start, w in sorted(weeks.items())
        ]
    )


class StatsService:
    """
    Service for adherence statistics
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or system_clock

    def window_days(self, window_days: int, include_today: Optional[bool] = None) -> List[date]:
        """
        Calendar days covered by a stats window.

        Runs from ``window_days`` before today through today inclusive, so a
        window of N days has N + 1 buckets. Passing ``include_today=False``
        (or setting STATS_INCLUDE_TODAY off) stops the walk at yesterday.
        """
        if include_today is None:
            include_today = settings.STATS_INCLUDE_TODAY

        today = self.clock.today()
        start = today - timedelta(days=window_days)
        end = today if include_today else today - timedelta(days=1)
        return [start + timedelta(days=i) for i in range((end - start).days + 1)]

    async def compute_stats(
        self,
        user_id: str,
        window_days: int = 30,
        include_today: Optional[bool] = None,
        db: Optional[Session] = None
    ) -> AdherenceStats:
        """
        Compute adherence statistics for an owner

        Args:
            user_id: Owner reference
            window_days: Number of days to look back
            include_today: Whether today's (incomplete) day gets a bucket
            db: Database session

        Returns:
            AdherenceStats; all zeros when the owner has no medications
        """
        def _compute(session: Session) -> AdherenceStats:
            medication_count = session.query(models.Medication).filter(
                models.Medication.user_id == user_id
            ).count()

            if medication_count == 0:
                return AdherenceStats()

            days = self.window_days(window_days, include_today)
            start, end = self.clock.today() - timedelta(days=window_days), self.clock.today()

            rows = session.query(models.MedicationLog.taken_date).filter(
                models.MedicationLog.user_id == user_id,
                models.MedicationLog.taken_date >= start,
                models.MedicationLog.taken_date <= end
            ).all()

            stats = aggregate_daily(days, (row[0] for row in rows), medication_count)
            logger.debug(
                f"Stats for user {user_id} over {window_days} days: "
                f"{stats.taken_days}/{stats.total_days} days fully taken"
            )
            return stats

        if db:
            return _compute(db)

        with get_db_context() as session:
            return _compute(session)


# Singleton instance
stats_service = StatsService()
