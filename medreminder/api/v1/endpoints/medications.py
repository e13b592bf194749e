from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from medreminder import crud, models, schemas
from medreminder.api import deps
from medreminder.db.session import get_db
from medreminder.models.medication import FREQUENCY_DEFAULT_TIMES

router = APIRouter()


def _get_owned_or_404(db: Session, medication_id: UUID, user: models.User) -> models.Medication:
    medication = crud.medication.get_for_owner(db, id=medication_id, user_id=user.id)
    if not medication:
        raise HTTPException(status_code=404, detail="Medication not found")
    return medication


def _require_recipient(db: Session, recipient_id: UUID, user: models.User) -> None:
    if not crud.recipient.get_for_owner(db, id=recipient_id, user_id=user.id):
        raise HTTPException(status_code=404, detail="Recipient not found")


@router.get("/frequencies", response_model=List[schemas.FrequencyOption])
def list_frequencies() -> Any:
    return [
        schemas.FrequencyOption(value=frequency, default_times=times)
        for frequency, times in FREQUENCY_DEFAULT_TIMES.items()
    ]


@router.get("/", response_model=List[schemas.Medication])
def list_medications(
    recipient_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return crud.medication.list_for_owner(db, user_id=current_user.id, recipient_id=recipient_id)


@router.post("/", response_model=schemas.Medication, status_code=201)
def create_medication(
    medication_in: schemas.MedicationCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    _require_recipient(db, medication_in.recipient_id, current_user)
    medication = crud.medication.create(db, obj_in=medication_in)
    return crud.medication.get_for_owner(db, id=medication.id, user_id=current_user.id)


@router.get("/{medication_id}", response_model=schemas.Medication)
def read_medication(
    medication_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return _get_owned_or_404(db, medication_id, current_user)


@router.put("/{medication_id}", response_model=schemas.Medication)
def update_medication(
    medication_id: UUID,
    medication_in: schemas.MedicationUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    medication = _get_owned_or_404(db, medication_id, current_user)
    update_data = medication_in.model_dump(exclude_unset=True)

    if update_data.get("recipient_id"):
        _require_recipient(db, update_data["recipient_id"], current_user)
    for field in ("recipient_id", "name", "dosage", "frequency", "times", "start_date", "end_date", "is_active"):
        if field in update_data and update_data[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
    if "frequency" in update_data:
        update_data["frequency"] = update_data["frequency"].value

    start_date = update_data.get("start_date", medication.start_date)
    end_date = update_data.get("end_date", medication.end_date)
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")

    crud.medication.update(db, db_obj=medication, obj_in=update_data)
    return crud.medication.get_for_owner(db, id=medication_id, user_id=current_user.id)


@router.delete("/{medication_id}", status_code=204)
def delete_medication(
    medication_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
):
    medication = _get_owned_or_404(db, medication_id, current_user)
    crud.medication.remove(db, db_obj=medication)
    return Response(status_code=204)
