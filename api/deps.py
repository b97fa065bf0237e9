"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Optional
from fastapi import Header, HTTPException, status

from database import get_db  # noqa: F401  (re-exported for routers)
from errors import ErrorMessages


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> str:
    """
    Owner id supplied by the identity provider in front of the API.
    Session handling lives there; here the id is opaque.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.AUTH.SESSION_EXPIRED,
        )
    if len(user_id) > 64:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user id",
        )
    return user_id


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_dose_status_service():
        from services.dose_status_service import dose_status_service
        return dose_status_service

    @staticmethod
    def get_ledger_service():
        from services.ledger_service import ledger_service
        return ledger_service

    @staticmethod
    def get_stats_service():
        from services.stats_service import stats_service
        return stats_service

    @staticmethod
    def get_notifier():
        from tools.notification_service import missed_dose_notifier
        return missed_dose_notifier

    @staticmethod
    def get_monitor():
        from actions.missed_dose_monitor import missed_dose_monitor
        return missed_dose_monitor

    @staticmethod
    def get_clock():
        from tools.time_window import system_clock
        return system_clock


# Service dependency instances
services = ServiceDependency()
