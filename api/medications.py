"""
Medications API Router
Endpoints for medication management
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationNotesUpdate,
    MedicationResponse,
    MedicationList,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Add a new medication

    - **name**: Medication name
    - **dosage**: Dosage (e.g., "500mg")
    - **deadline_time**: Daily deadline, HH:MM
    - **notes**: Optional notes
    """
    medication_service = services.get_medication_service()

    return await medication_service.add_medication(
        user_id=user_id,
        name=medication_data.name,
        dosage=medication_data.dosage,
        deadline_time=medication_data.deadline_time,
        notes=medication_data.notes,
        db=db
    )


@router.get("/", response_model=MedicationList)
async def list_medications(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get all medications for the current owner, newest first
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.get_user_medications(user_id, db=db)

    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications)
    )


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    medication_service = services.get_medication_service()
    return await medication_service.get_medication(medication_id, user_id=user_id, db=db)


@router.put("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: str,
    updates: MedicationUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Edit name, dosage, deadline or notes
    """
    medication_service = services.get_medication_service()

    return await medication_service.update_medication(
        medication_id,
        user_id,
        updates.model_dump(exclude_unset=True),
        db=db
    )


@router.patch("/{medication_id}/notes", response_model=MedicationResponse)
async def update_medication_notes(
    medication_id: str,
    payload: MedicationNotesUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Inline notes edit
    """
    medication_service = services.get_medication_service()

    return await medication_service.update_notes(medication_id, user_id, payload.notes, db=db)


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete a medication and its logs
    """
    medication_service = services.get_medication_service()

    await medication_service.delete_medication(medication_id, user_id, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
