"""
API Module
FastAPI routers for the DoseKeeper application
"""

from api.medications import router as medications_router
from api.adherence import router as adherence_router
from api.alerts import router as alerts_router

from api.deps import (
    get_db,
    get_current_user_id,
    services,
)


__all__ = [
    # Routers
    "medications_router",
    "adherence_router",
    "alerts_router",
    # Dependencies
    "get_db",
    "get_current_user_id",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(medications_router, prefix=prefix)
    app.include_router(adherence_router, prefix=prefix)
    app.include_router(alerts_router, prefix=prefix)
