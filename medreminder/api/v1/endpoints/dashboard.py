from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medreminder import crud, models, schemas
from medreminder.api import deps
from medreminder.db.session import get_db
from medreminder.utils.timezone import today_local

router = APIRouter()


@router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    today = today_local()
    sent = crud.reminder_log.count_sent_since(db, user_id=current_user.id, day=today)
    return schemas.DashboardStats(
        totalRecipients=crud.recipient.count_for_owner(db, user_id=current_user.id),
        totalMedications=crud.medication.count_active_for_owner(db, user_id=current_user.id),
        remindersToday=crud.reminder_log.count_scheduled_on(db, user_id=current_user.id, day=today),
        remindersSent=sent,
        remindersSuccess=sent,
    )
