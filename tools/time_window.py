"""
Time Window Tool
Local wall-clock helpers for deadline comparison and date keys.

Deadlines are compared as zero-padded ``HH:MM`` strings, so lexical order is
chronological order within a single day. No timezone conversion is done.
"""

import re
from datetime import datetime, date, time
from typing import Callable, Optional, Union

from errors import InvalidTimeFormat


_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class Clock:
    """
    Source of "now" for adherence computations.

    Services take a clock instead of reading the system time directly so
    classification and aggregation are reproducible with a fixed instant.
    """

    def __init__(self, now_fn: Optional[Callable[[], datetime]] = None):
        self._now_fn = now_fn or datetime.now

    def now(self) -> datetime:
        return self._now_fn()

    def now_time_of_day(self) -> str:
        """Current local time as ``HH:MM``"""
        return self.now().strftime("%H:%M")

    def today(self) -> date:
        return self.now().date()

    def today_key(self) -> str:
        """Today's local date as ``YYYY-MM-DD``"""
        return self.today().isoformat()


class FixedClock(Clock):
    """Clock frozen at a given instant"""

    def __init__(self, moment: datetime):
        self.moment = moment
        super().__init__(lambda: self.moment)

    def set(self, moment: datetime) -> None:
        self.moment = moment


def parse_time_of_day(value: Union[str, time]) -> time:
    """
    Parse ``HH:MM`` or ``HH:MM:SS`` into a ``time``.

    Raises:
        InvalidTimeFormat: if the value is not a valid 24-hour time
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)

    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidTimeFormat(value)

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        raise InvalidTimeFormat(value)

    return time(hour, minute, second)


def normalize_deadline(value: Union[str, time]) -> str:
    """Normalize a deadline to zero-padded ``HH:MM`` (seconds dropped)"""
    parsed = parse_time_of_day(value)
    return f"{parsed.hour:02d}:{parsed.minute:02d}"


def format_time_12h(time24: str) -> str:
    """
    Convert ``HH:MM`` (or ``HH:MM:SS``) to 12-hour display, e.g. "2:30 PM".
    Unparseable input is returned unchanged.
    """
    if not time24 or not isinstance(time24, str):
        return time24

    parts = time24.split(":")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
        return time24

    hours, minutes = int(parts[0]), parts[1]
    period = "PM" if hours >= 12 else "AM"
    if hours == 0:
        hours12 = 12
    elif hours > 12:
        hours12 = hours - 12
    else:
        hours12 = hours

    return f"{hours12}:{minutes.zfill(2)} {period}"


def format_time_display(time24: str, prefix: Optional[str] = None) -> str:
    """e.g. format_time_display("08:00", "Due by") -> "Due by 8:00 AM" """
    formatted = format_time_12h(time24)
    return f"{prefix} {formatted}" if prefix else formatted


# Default process-wide clock
system_clock = Clock()
