import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from .config import ReminderSettings
from .dispatcher import ReminderDispatcher
from .metrics import scheduler_matched_total, scheduler_runs_total, scheduler_skipped_total
from .repository import get_active_medications_for_reminders, reminder_log_exists
from .schemas import ReminderRequest, ScheduleRunResult
from medreminder.utils.timezone import minutes_of_day, now_local, parse_hhmm

logger = logging.getLogger(__name__)


def first_matching_time(times: List[str], current_minutes: int, tolerance_minutes: int) -> Optional[str]:
    """Return the first "HH:MM" entry within tolerance of current_minutes, in list order."""
    for t in times:
        try:
            scheduled_minutes = minutes_of_day(t)
        except ValueError:
            logger.warning("Ignoring malformed dose time %r", t)
            continue
        if abs(scheduled_minutes - current_minutes) <= tolerance_minutes:
            return t
    return None


class ReminderScheduler:
    """Finds doses due now and hands each one to the dispatcher.

    One run is sequential: medications are evaluated in order and each dispatch
    completes before the next starts. A failure to load medications aborts the
    run; a failure on one medication is recorded in ``errors`` and the run goes on.
    """

    def __init__(
        self,
        settings: ReminderSettings,
        dispatcher: ReminderDispatcher,
        session_factory: Callable[[], Session],
    ):
        self.settings = settings
        self.dispatcher = dispatcher
        self.session_factory = session_factory

    def run(self, now: Optional[datetime] = None) -> ScheduleRunResult:
        now = now or now_local()
        current_date = now.date()
        current_minutes = minutes_of_day(now)
        scheduler_runs_total.inc()
        logger.info("Processing reminders for %s at %s", current_date.isoformat(), now.strftime("%H:%M"))

        db = self.session_factory()
        try:
            medications = get_active_medications_for_reminders(db, current_date)
            logger.info("Found %d active medications", len(medications))

            processed = 0
            sent = 0
            errors: List[str] = []

            for med in medications:
                matched = first_matching_time(med.times or [], current_minutes, self.settings.TOLERANCE_MINUTES)
                if matched is None:
                    continue
                processed += 1
                scheduler_matched_total.inc()

                scheduled_time = datetime.combine(current_date, parse_hhmm(matched))
                try:
                    if reminder_log_exists(db, med.medication_id, scheduled_time):
                        scheduler_skipped_total.inc()
                        logger.info(
                            "Reminder already sent for medication %s at %s",
                            med.medication_name, scheduled_time.isoformat(),
                        )
                        continue
                    request = ReminderRequest(
                        medication_id=med.medication_id,
                        recipient_email=med.recipient_email,
                        recipient_name=med.recipient_name,
                        medication_name=med.medication_name,
                        dosage=med.dosage,
                        scheduled_time=scheduled_time,
                    )
                    outcome = self.dispatcher.dispatch(db, request)
                except Exception as e:
                    db.rollback()
                    logger.exception("Error sending reminder for %s", med.medication_name)
                    errors.append(f"Error sending reminder for {med.medication_name}: {e}")
                    continue

                if outcome.delivered:
                    sent += 1
                elif outcome.duplicate:
                    scheduler_skipped_total.inc()
                else:
                    errors.append(f"Failed to send reminder for {med.medication_name}: {outcome.reason}")
        finally:
            db.close()

        result = ScheduleRunResult(
            success=True,
            timestamp=now,
            remindersProcessed=processed,
            remindersSent=sent,
            errors=errors or None,
        )
        logger.info(
            "Reminder processing complete: processed=%d sent=%d errors=%d",
            processed, sent, len(errors),
        )
        return result
