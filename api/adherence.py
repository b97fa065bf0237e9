"""
Adherence API Router
Endpoints for today's doses, dose logging, history and statistics
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.adherence import (
    MedicationLogResponse,
    MedicationLogDetail,
    TakenToday,
    AdherenceHistory,
    DoseStatusEntry,
    DoseSummaryResponse,
    TodayView,
    WeeklyAdherenceResponse,
    AdherenceStatsResponse,
)
from api.schemas.medication import MedicationResponse
from config import settings
from tools.blob_store import ProofUpload
from tools.time_window import format_time_display


router = APIRouter(prefix="/adherence", tags=["adherence"])


@router.get("/today", response_model=TodayView)
async def get_today(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Today's medications sorted by deadline, each classified as
    pending / taken / missed, with countdowns and summary counts
    """
    medication_service = services.get_medication_service()
    ledger_service = services.get_ledger_service()
    status_service = services.get_dose_status_service()
    clock = services.get_clock()

    medications = await medication_service.get_user_medications(user_id, db=db)
    taken_ids = await ledger_service.todays_taken_ids(user_id, db=db)

    now = clock.now()
    classified = status_service.classify(
        status_service.sort_by_deadline(medications),
        taken_ids,
        now.strftime("%H:%M")
    )
    summary = status_service.summarize(classified)

    doses = []
    for dose in classified:
        remaining = status_service.remaining_time_until(dose.medication.deadline_time, now)
        doses.append(DoseStatusEntry(
            medication=MedicationResponse.model_validate(dose.medication),
            status=dose.status.value,
            deadline_display=format_time_display(dose.medication.deadline_time, "Due by"),
            remaining_seconds=int(remaining.total_seconds()),
            remaining_display=status_service.format_remaining(remaining),
        ))

    return TodayView(
        day=now.date(),
        now=now.strftime("%H:%M"),
        doses=doses,
        summary=DoseSummaryResponse(
            total=summary.total,
            taken=summary.taken,
            missed=summary.missed,
            pending=summary.pending,
            completion_percent=status_service.completion_percent(summary),
        ),
        countdown_interval_seconds=settings.COUNTDOWN_INTERVAL_SECONDS
    )


@router.get("/taken-today", response_model=TakenToday)
async def get_taken_today(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Medication ids already taken today
    """
    ledger_service = services.get_ledger_service()

    taken_ids = await ledger_service.todays_taken_ids(user_id, db=db)

    return TakenToday(
        day=services.get_clock().today(),
        medication_ids=sorted(taken_ids)
    )


@router.post("/{medication_id}/taken", response_model=MedicationLogResponse, status_code=status.HTTP_201_CREATED)
async def mark_taken(
    medication_id: str,
    photo: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Mark a medication as taken today, optionally with a proof photo.
    Repeating the call on the same day returns the existing entry.
    """
    ledger_service = services.get_ledger_service()

    proof = None
    if photo is not None:
        content = await photo.read()
        if len(content) > settings.MAX_PROOF_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Proof photo exceeds {settings.MAX_PROOF_BYTES} bytes"
            )
        if content:
            proof = ProofUpload(
                filename=photo.filename or "proof",
                content=content,
                content_type=photo.content_type
            )

    return await ledger_service.mark_taken(medication_id, user_id, proof=proof, db=db)


@router.get("/history", response_model=AdherenceHistory)
async def get_history(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Logged doses with medication details, newest day first
    """
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start_date must not be after end_date"
        )

    ledger_service = services.get_ledger_service()

    entries = await ledger_service.historical_entries(
        user_id,
        start_date=start_date,
        end_date=end_date,
        db=db
    )

    return AdherenceHistory(
        start_date=start_date,
        end_date=end_date,
        entries=[MedicationLogDetail.model_validate(e) for e in entries],
        total_entries=len(entries)
    )


@router.get("/stats", response_model=AdherenceStatsResponse)
async def get_stats(
    days: int = Query(settings.DEFAULT_STATS_WINDOW_DAYS, ge=1, le=365),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Day and week adherence over the last ``days`` days
    """
    stats_service = services.get_stats_service()

    stats = await stats_service.compute_stats(user_id, days, db=db)

    return AdherenceStatsResponse(
        days=days,
        total_days=stats.total_days,
        taken_days=stats.taken_days,
        missed_days=stats.missed_days,
        adherence_rate=stats.adherence_rate,
        weekly_data=[
            WeeklyAdherenceResponse(week_start=w.week_start, taken=w.taken, total=w.total)
            for w in stats.weekly_data
        ],
        available_periods=settings.HISTORY_PERIODS
    )
