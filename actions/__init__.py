"""
Actions Module
Background engines driven by the adherence core
"""

from .missed_dose_monitor import MissedDoseMonitor, missed_dose_monitor


__all__ = [
    "MissedDoseMonitor",
    "missed_dose_monitor",
]
