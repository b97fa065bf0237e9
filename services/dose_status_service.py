"""
Dose Status Service
Classifies today's scheduled medications as pending, taken or missed.

All functions here are pure: callers fetch medications and today's taken
ids first, then pass the current time of day explicitly.
"""

from typing import Any, Collection, Iterable, List, Optional, Sequence, Set, Union
from dataclasses import dataclass
from datetime import datetime, timedelta

from models import DoseStatus
from tools.time_window import Clock, parse_time_of_day, system_clock


@dataclass
class ClassifiedDose:
    """A medication paired with its status for today"""
    medication: Any
    status: DoseStatus

    @property
    def medication_id(self) -> str:
        return self.medication.id


@dataclass
class DoseSummary:
    """Counts for the today view"""
    total: int = 0
    taken: int = 0
    missed: int = 0
    pending: int = 0


class DoseStatusService:
    """
    Service for today's dose status

    Deadlines and the current time are ``HH:MM`` strings compared
    lexically; a dose is missed only once ``deadline < now`` (equal is
    still pending).
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or system_clock

    def classify(
        self,
        medications: Iterable[Any],
        taken_ids: Collection[str],
        now_time_of_day: str
    ) -> List[ClassifiedDose]:
        """
        Assign exactly one status to each medication

        Args:
            medications: Objects exposing ``id`` and ``deadline_time``
            taken_ids: Medication ids with a log entry for today
            now_time_of_day: Current local time as ``HH:MM``

        Returns:
            One ClassifiedDose per medication, input order preserved
        """
        taken = set(taken_ids)
        classified = []
        for med in medications:
            if med.id in taken:
                status = DoseStatus.TAKEN
            elif med.deadline_time[:5] < now_time_of_day:
                status = DoseStatus.MISSED
            else:
                status = DoseStatus.PENDING
            classified.append(ClassifiedDose(medication=med, status=status))
        return classified

    def summarize(self, classified: Sequence[ClassifiedDose]) -> DoseSummary:
        summary = DoseSummary(total=len(classified))
        for dose in classified:
            if dose.status == DoseStatus.TAKEN:
                summary.taken += 1
            elif dose.status == DoseStatus.MISSED:
                summary.missed += 1
            else:
                summary.pending += 1
        return summary

    def completion_percent(self, summary: DoseSummary) -> int:
        """Share of today's doses taken, as a whole percentage"""
        if summary.total == 0:
            return 0
        return int(summary.taken * 100 / summary.total + 0.5)

    def sort_by_deadline(self, medications: Iterable[Any]) -> List[Any]:
        """Ascending by deadline; ties keep their input order"""
        return sorted(medications, key=lambda m: m.deadline_time)

    def remaining_time_until(
        self,
        deadline_time: str,
        now: Union[datetime, str]
    ) -> timedelta:
        """
        Time left before a deadline, for countdown display.

        Both times are anchored to the same calendar day, so a deadline
        that is earlier in the day than ``now`` is overdue (zero) even when
        it is only minutes away after midnight. A ``HH:MM`` string ``now``
        is placed on the clock's current day.
        """
        if isinstance(now, str):
            now = datetime.combine(self.clock.today(), parse_time_of_day(now))

        deadline = datetime.combine(now.date(), parse_time_of_day(deadline_time))
        remaining = deadline - now
        return remaining if remaining > timedelta(0) else timedelta(0)

    def format_remaining(self, remaining: timedelta) -> str:
        """Countdown label, e.g. "2h 05m" or "Overdue" """
        total_seconds = int(remaining.total_seconds())
        if total_seconds <= 0:
            return "Overdue"

        hours, rest = divmod(total_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        if hours:
            return f"{hours}h {minutes:02d}m"
        if minutes:
            return f"{minutes}m {seconds:02d}s"
        return f"{seconds}s"

    def newly_missed(
        self,
        classified: Iterable[ClassifiedDose],
        already_alerted: Set[str]
    ) -> List[Any]:
        """Missed medications that have not triggered an alert yet"""
        return [
            dose.medication for dose in classified
            if dose.status == DoseStatus.MISSED and dose.medication.id not in already_alerted
        ]


# Singleton instance
dose_status_service = DoseStatusService()
