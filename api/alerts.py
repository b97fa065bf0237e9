"""
Alerts API Router
Simulated caretaker emails for missed doses
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.adherence import AlertList, EmailAlertResponse


router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("/", response_model=AlertList)
async def list_alerts(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Run a missed-dose check now and return today's undismissed alerts.
    The owner is also added to the background monitor.
    """
    monitor = services.get_monitor()
    notifier = services.get_notifier()

    monitor.watch(user_id)
    await monitor.check_user(user_id, db=db)

    alerts = notifier.get_alerts(user_id, services.get_clock().today())
    return AlertList(
        alerts=[EmailAlertResponse.model_validate(a) for a in alerts],
        total=len(alerts)
    )


@router.post("/{alert_id}/dismiss", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_alert(
    alert_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """
    Hide an alert from the caretaker dashboard
    """
    notifier = services.get_notifier()

    if not notifier.dismiss(user_id, alert_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Alert {alert_id} not found"
        )
