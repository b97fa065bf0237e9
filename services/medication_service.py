"""
Medication Service
Business logic for medication management
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from database import get_db_context
import models
from errors import InputValidationError, InvalidTimeFormat, MedicationNotFoundError, PersistenceError
from tools.sanitize import sanitize_medication_name, sanitize_dosage, sanitize_notes
from tools.time_window import normalize_deadline


logger = logging.getLogger(__name__)


def _clean_required(field: str, value: str, sanitizer) -> str:
    cleaned = sanitizer(value)
    if not cleaned:
        raise InputValidationError(f"Medication {field} is required")
    return cleaned


class MedicationService:
    """
    Service for medication-related operations
    """

    async def add_medication(
        self,
        user_id: str,
        name: str,
        dosage: str,
        deadline_time: str,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication for an owner

        Args:
            user_id: Owner reference
            name: Medication name (HTML stripped, max 200 chars)
            dosage: Dosage (e.g., "500mg", max 100 chars)
            deadline_time: Daily deadline as HH:MM
            notes: Optional caretaker notes (max 1000 chars)
            db: Database session

        Returns:
            Created Medication object

        Raises:
            InputValidationError: if name or dosage is empty after sanitizing
            InvalidTimeFormat: if deadline_time is not a valid time
        """
        medication = models.Medication(
            user_id=user_id,
            name=_clean_required("name", name, sanitize_medication_name),
            dosage=_clean_required("dosage", dosage, sanitize_dosage),
            deadline_time=normalize_deadline(deadline_time),
            notes=sanitize_notes(notes) or None,
        )

        def _add(session: Session) -> models.Medication:
            session.add(medication)
            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Could not add medication: {e}") from e
            session.refresh(medication)

            logger.info(f"Added medication {medication.name} for user {user_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        medication_id: str,
        user_id: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Get medication by ID, optionally scoped to an owner"""
        def _get(session: Session) -> models.Medication:
            query = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            )
            if user_id is not None:
                query = query.filter(models.Medication.user_id == user_id)

            medication = query.first()
            if not medication:
                raise MedicationNotFoundError(medication_id)
            return medication

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_user_medications(
        self,
        user_id: str,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """
        Get all medications for an owner, newest first.

        Deadlines are validated here, at the load boundary, so downstream
        classification can assume well-formed HH:MM values.

        Raises:
            InvalidTimeFormat: if a stored deadline is malformed
        """
        def _get(session: Session) -> List[models.Medication]:
            medications = session.query(models.Medication).filter(
                models.Medication.user_id == user_id
            ).order_by(models.Medication.created_at.desc()).all()

            for med in medications:
                # Lexical comparison needs the zero-padded form
                if normalize_deadline(med.deadline_time) != med.deadline_time:
                    raise InvalidTimeFormat(med.deadline_time)
            return medications

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def count_user_medications(
        self,
        user_id: str,
        db: Optional[Session] = None
    ) -> int:
        def _count(session: Session) -> int:
            return session.query(func.count(models.Medication.id)).filter(
                models.Medication.user_id == user_id
            ).scalar() or 0

        if db:
            return _count(db)

        with get_db_context() as session:
            return _count(session)

    async def update_medication(
        self,
        medication_id: str,
        user_id: str,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> models.Medication:
        """Update name, dosage, deadline or notes; other keys are ignored"""
        cleaners = {
            "name": lambda v: _clean_required("name", v, sanitize_medication_name),
            "dosage": lambda v: _clean_required("dosage", v, sanitize_dosage),
            "deadline_time": normalize_deadline,
            "notes": lambda v: sanitize_notes(v) or None,
        }
        cleaned = {
            field: cleaners[field](value)
            for field, value in updates.items()
            if field in cleaners and value is not None
        }

        def _update(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.user_id == user_id
            ).first()

            if not medication:
                raise MedicationNotFoundError(medication_id)

            for field, value in cleaned.items():
                setattr(medication, field, value)

            medication.updated_at = datetime.utcnow()
            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Could not update medication {medication_id}: {e}") from e
            session.refresh(medication)

            logger.info(f"Updated medication {medication_id}: {sorted(cleaned)}")
            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def update_notes(
        self,
        medication_id: str,
        user_id: str,
        notes: Optional[str],
        db: Optional[Session] = None
    ) -> models.Medication:
        """Inline notes edit from the caretaker view (last write wins)"""
        def _update(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.user_id == user_id
            ).first()

            if not medication:
                raise MedicationNotFoundError(medication_id)

            medication.notes = sanitize_notes(notes) or None
            medication.updated_at = datetime.utcnow()
            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Could not update notes for {medication_id}: {e}") from e
            session.refresh(medication)
            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_medication(
        self,
        medication_id: str,
        user_id: str,
        db: Optional[Session] = None
    ) -> None:
        """Delete a medication together with its logs"""
        def _delete(session: Session) -> None:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.user_id == user_id
            ).first()

            if not medication:
                raise MedicationNotFoundError(medication_id)

            session.delete(medication)
            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Could not delete medication {medication_id}: {e}") from e

            logger.info(f"Deleted medication {medication_id} for user {user_id}")

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
medication_service = MedicationService()
