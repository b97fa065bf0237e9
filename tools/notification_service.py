"""
Notification Service Tool
Simulated caretaker email alerts for missed doses.

Nothing leaves the process: an "email" is an EmailAlert record plus a log
line, which the caretaker dashboard renders as a banner.
"""

import logging
import uuid
from typing import Dict, Iterable, List, Optional, Set, Tuple
from dataclasses import dataclass
from datetime import datetime, date

from config import settings
from tools.time_window import Clock, format_time_display, system_clock


logger = logging.getLogger(__name__)


MISSED_DOSE_TEMPLATE = {
    "subject": "Missed Medication: {medication}",
    "body": (
        "Hello, your patient has missed their {medication} dose "
        "({deadline}). Please check in with them."
    ),
}


@dataclass
class EmailAlert:
    """A simulated email sent to the caretaker"""
    id: str
    user_id: str
    medication_id: str
    medication_name: str
    deadline_time: str
    sent_at: datetime
    recipient: str
    subject: str
    body: str
    alert_date: Optional[date] = None

    def __post_init__(self):
        if self.alert_date is None:
            self.alert_date = self.sent_at.date()

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "medication_id": self.medication_id,
            "medication_name": self.medication_name,
            "deadline_time": self.deadline_time,
            "sent_at": self.sent_at.isoformat(),
            "recipient": self.recipient,
            "subject": self.subject,
            "body": self.body,
        }


class MissedDoseNotifier:
    """
    Remembers which medications have already triggered an alert today so each
    missed dose produces at most one email per owner per day.
    """

    def __init__(self, recipient: Optional[str] = None, clock: Optional[Clock] = None):
        self.recipient = recipient or settings.CARETAKER_EMAIL
        self.clock = clock or system_clock
        self._alerts: Dict[Tuple[str, date], Dict[str, EmailAlert]] = {}
        self._dismissed: Set[str] = set()

    def _prune(self, day: date) -> None:
        """Drop memory of earlier days"""
        for key in [k for k in self._alerts if k[1] < day]:
            for alert in self._alerts.pop(key).values():
                self._dismissed.discard(alert.id)

    def alerted_ids(self, user_id: str, day: date) -> Set[str]:
        return set(self._alerts.get((user_id, day), {}))

    def notify_missed(
        self,
        user_id: str,
        medications: Iterable,
        sent_at: datetime
    ) -> List[EmailAlert]:
        """
        Send (simulate) an email for each newly missed medication.

        Args:
            user_id: Owner whose doses were missed
            medications: Medications currently classified as missed
            sent_at: Clock time of the check

        Returns:
            Alerts created by this call (already-alerted medications skipped)
        """
        day = sent_at.date()
        self._prune(day)
        bucket = self._alerts.setdefault((user_id, day), {})

        created = []
        for med in medications:
            if med.id in bucket:
                continue

            deadline = format_time_display(med.deadline_time, "due by")
            alert = EmailAlert(
                id=str(uuid.uuid4())[:8],
                user_id=user_id,
                medication_id=med.id,
                medication_name=med.name,
                deadline_time=med.deadline_time,
                sent_at=sent_at,
                recipient=self.recipient,
                subject=MISSED_DOSE_TEMPLATE["subject"].format(medication=med.name),
                body=MISSED_DOSE_TEMPLATE["body"].format(medication=med.name, deadline=deadline),
                alert_date=day,
            )
            bucket[med.id] = alert
            created.append(alert)
            logger.info(f"[EMAIL] Email sent to caretaker: Patient missed {med.name}")

        return created

    def get_alerts(self, user_id: str, day: Optional[date] = None, include_dismissed: bool = False) -> List[EmailAlert]:
        """Alerts for an owner on a day (default: the clock's today), oldest first"""
        day = day or self.clock.today()
        alerts = sorted(
            self._alerts.get((user_id, day), {}).values(),
            key=lambda a: a.sent_at
        )
        if include_dismissed:
            return alerts
        return [a for a in alerts if a.id not in self._dismissed]

    def dismiss(self, user_id: str, alert_id: str) -> bool:
        """Hide an alert from the dashboard; returns False if unknown"""
        for (owner, _), alerts in self._alerts.items():
            if owner != user_id:
                continue
            if any(a.id == alert_id for a in alerts.values()):
                self._dismissed.add(alert_id)
                return True
        return False

    def reset(self) -> None:
        self._alerts.clear()
        self._dismissed.clear()


# Singleton instance
missed_dose_notifier = MissedDoseNotifier()
