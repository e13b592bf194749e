from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from medreminder import crud, models, schemas
from medreminder.api import deps
from medreminder.db.session import get_db

router = APIRouter()


@router.get("/", response_model=List[schemas.ReminderLog])
def list_reminder_logs(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """Reminder history for the caller's recipients, newest first."""
    return crud.reminder_log.list_for_owner(db, user_id=current_user.id, limit=limit)
