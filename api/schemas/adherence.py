"""
Adherence Schemas
Pydantic models for adherence tracking API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum

from api.schemas.medication import MedicationResponse
from models import LogStatus


class DoseStatusEnum(str, Enum):
    """Status of today's dose"""
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"


# ==================== LOG SCHEMAS ====================

class MedicationLogResponse(BaseModel):
    """Schema for a medication log entry"""
    id: str
    medication_id: str
    user_id: str
    taken_date: date
    status: LogStatus
    photo_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationLogDetail(MedicationLogResponse):
    """Log entry joined with its medication"""
    medication: Optional[MedicationResponse] = None


class TakenToday(BaseModel):
    """Medication ids taken today"""
    day: date
    medication_ids: List[str]


class AdherenceHistory(BaseModel):
    """Adherence history list"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    entries: List[MedicationLogDetail]
    total_entries: int


# ==================== TODAY VIEW ====================

class DoseStatusEntry(BaseModel):
    """A medication with its status and countdown for today"""
    medication: MedicationResponse
    status: DoseStatusEnum
    deadline_display: str
    remaining_seconds: int
    remaining_display: str


class DoseSummaryResponse(BaseModel):
    """Counts for today"""
    total: int
    taken: int
    missed: int
    pending: int
    completion_percent: int = Field(..., ge=0, le=100)


class TodayView(BaseModel):
    """Today's doses sorted by deadline"""
    day: date
    now: str
    doses: List[DoseStatusEntry]
    summary: DoseSummaryResponse
    countdown_interval_seconds: int = Field(1, description="How often clients should refresh countdowns")


# ==================== STATS ====================

class WeeklyAdherenceResponse(BaseModel):
    """Weekly taken/total counts"""
    week_start: date
    taken: int
    total: int


class AdherenceStatsResponse(BaseModel):
    """Adherence statistics over a window of days"""
    days: int
    total_days: int
    taken_days: int
    missed_days: int
    adherence_rate: int = Field(..., ge=0, le=100)
    weekly_data: List[WeeklyAdherenceResponse]
    available_periods: List[int] = Field(default_factory=list)


# ==================== ALERTS ====================

class EmailAlertResponse(BaseModel):
    """Simulated caretaker email"""
    id: str
    medication_id: str
    medication_name: str
    deadline_time: str
    sent_at: datetime
    recipient: str
    subject: str
    body: str

    model_config = ConfigDict(from_attributes=True)


class AlertList(BaseModel):
    alerts: List[EmailAlertResponse]
    total: int
