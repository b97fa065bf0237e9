"""
Ledger Service
Records taken doses, at most once per medication per owner per day.
"""

import logging
from typing import List, Optional, Set
from datetime import date
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import get_db_context
import models
from models import LogStatus
from errors import MedicationNotFoundError, PersistenceError
from tools.blob_store import BlobStore, ProofUpload, blob_store as default_blob_store
from tools.time_window import Clock, system_clock


logger = logging.getLogger(__name__)


class LedgerService:
    """
    Service for the medication log ledger

    The (medication_id, user_id, taken_date) unique constraint on
    ``medication_logs`` is the authority on duplicates. The existence check
    in ``mark_taken`` only avoids a needless upload and insert; a constraint
    violation on insert means another writer got there first.
    """

    def __init__(self, clock: Optional[Clock] = None, blob_store: Optional[BlobStore] = None):
        self.clock = clock or system_clock
        self.blob_store = blob_store or default_blob_store

    def _find_entry(
        self,
        session: Session,
        medication_id: str,
        user_id: str,
        taken_date: date
    ) -> Optional[models.MedicationLog]:
        return session.query(models.MedicationLog).filter(
            models.MedicationLog.medication_id == medication_id,
            models.MedicationLog.user_id == user_id,
            models.MedicationLog.taken_date == taken_date
        ).first()

    def _proof_path(self, user_id: str, medication_id: str, proof: ProofUpload) -> str:
        millis = int(self.clock.now().timestamp() * 1000)
        return f"{user_id}/{medication_id}-{millis}{proof.extension}"

    async def mark_taken(
        self,
        medication_id: str,
        user_id: str,
        proof: Optional[ProofUpload] = None,
        db: Optional[Session] = None
    ) -> models.MedicationLog:
        """
        Record that a medication was taken today

        Calling this again on the same day is a silent no-op that returns the
        existing entry. The proof photo is uploaded before the log insert;
        the two steps are not atomic, so a failed insert can leave an
        orphaned blob behind.

        Args:
            medication_id: Medication taken
            user_id: Owner reference
            proof: Optional proof photo
            db: Database session

        Returns:
            The log entry for today (new or pre-existing)

        Raises:
            MedicationNotFoundError: if the medication does not belong to the owner
            PersistenceError: if the blob store or database rejects the write
        """
        async def _mark(session: Session) -> models.MedicationLog:
            today = self.clock.today()

            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.user_id == user_id
            ).first()
            if not medication:
                raise MedicationNotFoundError(medication_id)

            existing = self._find_entry(session, medication_id, user_id, today)
            if existing:
                logger.debug(f"Medication {medication_id} already taken on {today} by {user_id}")
                return existing

            photo_url = None
            if proof is not None:
                path = self._proof_path(user_id, medication_id, proof)
                photo_url = await self.blob_store.upload(path, proof.content, proof.content_type)

            log = models.MedicationLog(
                medication_id=medication_id,
                user_id=user_id,
                taken_date=today,
                status=LogStatus.TAKEN,
                photo_url=photo_url
            )
            session.add(log)

            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                existing = self._find_entry(session, medication_id, user_id, today)
                if existing is None:
                    raise PersistenceError(
                        f"Insert rejected for medication {medication_id} on {today}"
                    )
                if photo_url:
                    logger.warning(f"Orphaned proof blob {photo_url}: dose was already logged")
                logger.debug(f"Concurrent mark_taken for {medication_id} on {today}; keeping existing entry")
                return existing
            except SQLAlchemyError as e:
                session.rollback()
                if photo_url:
                    logger.warning(f"Orphaned proof blob {photo_url}: log insert failed")
                raise PersistenceError(f"Could not record dose for {medication_id}: {e}") from e

            session.refresh(log)
            logger.info(f"Logged taken dose for user {user_id}, medication {medication_id} on {today}")
            return log

        if db:
            return await _mark(db)

        with get_db_context() as session:
            return await _mark(session)

    async def todays_taken_ids(
        self,
        user_id: str,
        db: Optional[Session] = None
    ) -> Set[str]:
        """Medication ids with a log entry for today"""
        def _get(session: Session) -> Set[str]:
            rows = session.query(models.MedicationLog.medication_id).filter(
                models.MedicationLog.user_id == user_id,
                models.MedicationLog.taken_date == self.clock.today()
            ).all()
            return {row[0] for row in rows}

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def historical_entries(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[models.MedicationLog]:
        """
        Log entries with their medication, newest day first.
        A missing bound leaves that side of the range open.
        """
        def _get(session: Session) -> List[models.MedicationLog]:
            query = session.query(models.MedicationLog).options(
                joinedload(models.MedicationLog.medication)
            ).filter(
                models.MedicationLog.user_id == user_id
            )

            if start_date:
                query = query.filter(models.MedicationLog.taken_date >= start_date)
            if end_date:
                query = query.filter(models.MedicationLog.taken_date <= end_date)

            return query.order_by(
                models.MedicationLog.taken_date.desc(),
                models.MedicationLog.created_at.desc()
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
ledger_service = LedgerService()
