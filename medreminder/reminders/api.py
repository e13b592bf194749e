import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from medreminder.api.deps import verify_service_key_dependency
from medreminder.db.session import get_db
from .dispatcher import ReminderDispatcher
from .scheduler import ReminderScheduler
from .schemas import FunctionError, ReminderRequest, SendReminderResponse
from .service import get_dispatcher, get_scheduler

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=FunctionError(error=message).model_dump())


@router.options("/schedule-reminders", include_in_schema=False)
@router.options("/send-reminder", include_in_schema=False)
def preflight():
    return PlainTextResponse("ok")


@router.post("/schedule-reminders", dependencies=[Depends(verify_service_key_dependency)])
def schedule_reminders_endpoint(scheduler: ReminderScheduler = Depends(get_scheduler)):
    """Run one scheduling pass. Partial failures are reported in ``errors`` with success=true."""
    try:
        result = scheduler.run()
    except Exception as e:
        logger.exception("Error in schedule-reminders")
        return _error(str(e) or "Failed to process reminders")
    return JSONResponse(content=result.model_dump(mode="json", exclude_none=True))


@router.post("/send-reminder", dependencies=[Depends(verify_service_key_dependency)])
def send_reminder_endpoint(
    body: Any = Body(None),
    db: Session = Depends(get_db),
    dispatcher: ReminderDispatcher = Depends(get_dispatcher),
):
    try:
        request = ReminderRequest.model_validate(body)
    except ValidationError as e:
        return _error(f"Invalid reminder request: {e.errors(include_url=False)}")

    try:
        outcome = dispatcher.dispatch(db, request)
    except Exception as e:
        db.rollback()
        logger.exception("Error sending reminder")
        return _error(str(e) or "Failed to send reminder")

    if outcome.duplicate:
        message = "Reminder already sent"
    elif outcome.delivered:
        message = "Reminder sent successfully"
    else:
        return _error(f"Failed to send reminder: {outcome.reason}")

    return SendReminderResponse(
        success=True,
        message=message,
        email=request.recipient_email,
        medication=request.medication_name,
    )
