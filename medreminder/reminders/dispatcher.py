import html
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .config import ReminderSettings
from .metrics import reminders_dispatch_failed_total, reminders_dispatch_success_total
from .repository import claim_reminder, get_recipient_id_for_medication, record_outcome
from .schemas import ReminderRequest
from .transport import Delivered, EmailNotification, EmailTransport, Rejected, TransportError
from medreminder.models.reminder_log import ReminderStatus
from medreminder.utils.timezone import wall_clock_now

logger = logging.getLogger(__name__)


class MedicationNotFound(LookupError):
    pass


@dataclass
class DispatchOutcome:
    status: str  # "sent", "failed" or "duplicate"
    reason: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status == ReminderStatus.SENT.value

    @property
    def duplicate(self) -> bool:
        return self.status == "duplicate"


def format_scheduled_time(scheduled_time: datetime) -> str:
    return scheduled_time.strftime("%A, %B %d, %Y at %I:%M %p")


def render_reminder_email(request: ReminderRequest) -> EmailNotification:
    when = format_scheduled_time(request.scheduled_time)
    subject = f"Medicine Reminder: {request.medication_name}"
    # Escaped for the HTML part only; the text part carries the raw values
    name = html.escape(request.recipient_name)
    medication = html.escape(request.medication_name)
    dosage = html.escape(request.dosage)
    body = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8fafc;">
      <div style="background-color: white; border-radius: 8px; padding: 30px;">
        <h1 style="color: #1f2937; text-align: center; font-size: 24px;">Medicine Reminder</h1>
        <div style="background-color: #eff6ff; border-left: 4px solid #3b82f6; padding: 20px; margin-bottom: 25px;">
          <h2 style="color: #1e40af; margin: 0 0 10px 0; font-size: 18px;">Time to take your medication!</h2>
          <p style="color: #374151; margin: 0;">Hi {name}, this is a friendly reminder about your medication.</p>
        </div>
        <div style="background-color: #f9fafb; border-radius: 6px; padding: 15px; margin-bottom: 25px;">
          <p style="margin: 0 0 8px 0;"><strong>Medication:</strong> {medication}</p>
          <p style="margin: 0 0 8px 0;"><strong>Dosage:</strong> {dosage}</p>
          <p style="margin: 0;"><strong>Scheduled Time:</strong> {when}</p>
        </div>
        <div style="background-color: #fef3c7; border-radius: 6px; padding: 15px; margin-bottom: 25px;">
          <p style="color: #92400e; margin: 0; font-size: 14px;">
            <strong>Important:</strong> Please take your medication as prescribed. If you have any questions or concerns, consult with your healthcare provider.
          </p>
        </div>
        <p style="color: #6b7280; text-align: center; font-size: 12px;">
          This reminder was sent automatically by Medicine Reminder.<br>
          If you need to modify your medication schedule, please contact your family member who set up these reminders.
        </p>
      </div>
    </div>
    """
    text = (
        f"Medicine Reminder\n\n"
        f"Hi {request.recipient_name}, this is a friendly reminder about your medication.\n\n"
        f"Medication: {request.medication_name}\n"
        f"Dosage: {request.dosage}\n"
        f"Scheduled Time: {when}\n\n"
        f"Please take your medication as prescribed.\n"
    )
    return EmailNotification(to_email=request.recipient_email, subject=subject, html=body, text=text)


class ReminderDispatcher:
    """Renders one reminder, sends it and records the outcome in reminder_logs."""

    def __init__(self, settings: ReminderSettings, transport: EmailTransport):
        self.settings = settings
        self.transport = transport

    def dispatch(self, db: Session, request: ReminderRequest) -> DispatchOutcome:
        recipient_id = get_recipient_id_for_medication(db, request.medication_id)
        if recipient_id is None:
            raise MedicationNotFound(f"Medication {request.medication_id} not found")

        notification = render_reminder_email(request)

        log = claim_reminder(db, request.medication_id, recipient_id, request.scheduled_time)
        if log is None:
            logger.info(
                "Reminder already claimed for medication %s at %s",
                request.medication_name, request.scheduled_time.isoformat(),
            )
            return DispatchOutcome(status="duplicate")

        try:
            result = self.transport.send(notification)
        except Exception as e:
            logger.exception("Email transport raised for %s", request.recipient_email)
            result = TransportError(reason=str(e) or e.__class__.__name__)

        if isinstance(result, Delivered):
            record_outcome(db, log.id, ReminderStatus.SENT, wall_clock_now())
            reminders_dispatch_success_total.inc()
            logger.info("Reminder sent for %s to %s", request.medication_name, request.recipient_email)
            return DispatchOutcome(status=ReminderStatus.SENT.value)

        if isinstance(result, Rejected):
            reason = f"rejected: {result.reason}"
        else:
            reason = f"transport error: {result.reason}"
        record_outcome(db, log.id, ReminderStatus.FAILED, wall_clock_now(), error_message=reason)
        reminders_dispatch_failed_total.inc()
        logger.warning("Reminder for %s not delivered (%s)", request.medication_name, reason)
        return DispatchOutcome(status=ReminderStatus.FAILED.value, reason=reason)
