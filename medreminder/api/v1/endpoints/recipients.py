from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from medreminder import crud, models, schemas
from medreminder.api import deps
from medreminder.db.session import get_db

router = APIRouter()


def _get_owned_or_404(db: Session, recipient_id: UUID, user: models.User) -> models.Recipient:
    recipient = crud.recipient.get_for_owner(db, id=recipient_id, user_id=user.id)
    if not recipient:
        raise HTTPException(status_code=404, detail="Recipient not found")
    return recipient


@router.get("/", response_model=List[schemas.Recipient])
def list_recipients(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return crud.recipient.list_for_owner(db, user_id=current_user.id)


@router.post("/", response_model=schemas.Recipient, status_code=201)
def create_recipient(
    recipient_in: schemas.RecipientCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return crud.recipient.create_with_owner(db, obj_in=recipient_in, user_id=current_user.id)


@router.get("/{recipient_id}", response_model=schemas.Recipient)
def read_recipient(
    recipient_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    return _get_owned_or_404(db, recipient_id, current_user)


@router.put("/{recipient_id}", response_model=schemas.Recipient)
def update_recipient(
    recipient_id: UUID,
    recipient_in: schemas.RecipientUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    recipient = _get_owned_or_404(db, recipient_id, current_user)
    update_data = recipient_in.model_dump(exclude_unset=True)
    for field in ("name", "email", "timezone"):
        if field in update_data and update_data[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
    return crud.recipient.update(db, db_obj=recipient, obj_in=update_data)


@router.delete("/{recipient_id}", status_code=204)
def delete_recipient(
    recipient_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
):
    """Delete a recipient together with its medications and reminder logs."""
    recipient = _get_owned_or_404(db, recipient_id, current_user)
    crud.recipient.remove(db, db_obj=recipient)
    return Response(status_code=204)
