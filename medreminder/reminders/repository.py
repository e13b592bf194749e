from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medreminder.models.medication import Medication
from medreminder.models.recipient import Recipient
from medreminder.models.reminder_log import ReminderLog, ReminderMethod, ReminderStatus


@dataclass
class ActiveMedicationRow:
    """Denormalized medication + recipient row evaluated by the scheduler"""
    medication_id: UUID
    medication_name: str
    dosage: str
    times: List[str]
    recipient_id: UUID
    recipient_name: str
    recipient_email: str
    recipient_timezone: str


def get_active_medications_for_reminders(db: Session, today: date) -> List[ActiveMedicationRow]:
    stmt = (
        select(
            Medication.id,
            Medication.name,
            Medication.dosage,
            Medication.times,
            Recipient.id,
            Recipient.name,
            Recipient.email,
            Recipient.timezone,
        )
        .join(Recipient, Medication.recipient_id == Recipient.id)
        .where(Medication.is_active == True)  # noqa: E712
        .where(Medication.start_date <= today)
        .where(Medication.end_date >= today)
        .order_by(Medication.created_at.asc())
    )
    return [ActiveMedicationRow(*row) for row in db.execute(stmt).all()]


def reminder_log_exists(db: Session, medication_id: UUID, scheduled_time: datetime) -> bool:
    stmt = (
        select(ReminderLog.id)
        .where(ReminderLog.medication_id == medication_id)
        .where(ReminderLog.scheduled_time == scheduled_time)
        .limit(1)
    )
    return db.execute(stmt).first() is not None


def get_recipient_id_for_medication(db: Session, medication_id: UUID) -> Optional[UUID]:
    return db.execute(
        select(Medication.recipient_id).where(Medication.id == medication_id)
    ).scalar_one_or_none()


def claim_reminder(
    db: Session,
    medication_id: UUID,
    recipient_id: UUID,
    scheduled_time: datetime,
    method: ReminderMethod = ReminderMethod.EMAIL,
) -> Optional[ReminderLog]:
    """Insert a pending log for the occurrence unless one already exists.

    Returns None when another run already holds the (medication_id, scheduled_time) key.
    """
    log = ReminderLog(
        medication_id=medication_id,
        recipient_id=recipient_id,
        scheduled_time=scheduled_time,
        method=method.value,
        status=ReminderStatus.PENDING.value,
    )
    db.add(log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None
    db.refresh(log)
    return log


def record_outcome(
    db: Session,
    log_id: UUID,
    status: ReminderStatus,
    sent_time: datetime,
    error_message: Optional[str] = None,
) -> None:
    db.execute(
        update(ReminderLog)
        .where(ReminderLog.id == log_id)
        .values(status=status.value, sent_time=sent_time, error_message=error_message)
    )
    db.commit()
