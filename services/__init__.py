"""
Services Module
Business logic layer for the DoseKeeper application
"""

from services.dose_status_service import DoseStatusService, dose_status_service
from services.medication_service import MedicationService, medication_service
from services.ledger_service import LedgerService, ledger_service
from services.stats_service import StatsService, stats_service


__all__ = [
    # Service classes
    "DoseStatusService",
    "MedicationService",
    "LedgerService",
    "StatsService",
    # Singleton instances
    "dose_status_service",
    "medication_service",
    "ledger_service",
    "stats_service",
]
