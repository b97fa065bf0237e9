"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from tools.sanitize import sanitize_time


HHMM_PATTERN = r"^\d{1,2}:\d{2}(:\d{2})?$"


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    deadline_time: str = Field(..., pattern=HHMM_PATTERN, description="Daily deadline, HH:MM (24h)")


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("deadline_time")
    @classmethod
    def clamp_deadline(cls, value: str) -> str:
        return sanitize_time(value)


class MedicationUpdate(BaseModel):
    """Schema for updating medication"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    deadline_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("deadline_time")
    @classmethod
    def clamp_deadline(cls, value: Optional[str]) -> Optional[str]:
        return sanitize_time(value) if value is not None else None


class MedicationNotesUpdate(BaseModel):
    """Schema for the inline notes editor"""
    notes: Optional[str] = Field(None, max_length=1000)


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: str
    user_id: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """List of medications"""
    medications: List[MedicationResponse]
    total: int
