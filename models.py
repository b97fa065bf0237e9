"""
Database Models
SQLAlchemy ORM models for DoseKeeper
"""

import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Date, Enum, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from config import TableNames
from database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


# ==================== ENUMS ====================

class DoseStatus(str, PyEnum):
    """Status of today's dose for a scheduled medication"""
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"


class LogStatus(str, PyEnum):
    """Status written on a medication log (only taken-events are recorded)"""
    TAKEN = "taken"


# ==================== MODELS ====================

class Medication(Base):
    """A medication the owner must take once per day before its deadline"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g., "500mg"
    deadline_time = Column(String(5), nullable=False)  # "HH:MM", local wall clock
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    logs = relationship("MedicationLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_user_created", "user_id", "created_at"),
    )


class MedicationLog(Base):
    """Record that a medication was taken by its owner on a calendar day"""
    __tablename__ = TableNames.MEDICATION_LOGS

    id = Column(String(36), primary_key=True, default=_new_id)
    medication_id = Column(
        String(36),
        ForeignKey(f"{TableNames.MEDICATIONS}.id", ondelete="CASCADE"),
        nullable=False
    )
    user_id = Column(String(64), nullable=False)

    taken_date = Column(Date, nullable=False)
    status = Column(Enum(LogStatus), nullable=False, default=LogStatus.TAKEN)
    photo_url = Column(String(1024))  # Optional proof reference

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("medication_id", "user_id", "taken_date", name="uq_medication_log_per_day"),
        Index("ix_medication_logs_user_date", "user_id", "taken_date"),
    )
