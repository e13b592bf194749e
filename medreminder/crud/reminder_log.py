from datetime import date, datetime, time, timedelta
from typing import List

from sqlalchemy.orm import Session, joinedload

from medreminder.models.recipient import Recipient
from medreminder.models.reminder_log import ReminderLog, ReminderStatus


class CRUDReminderLog:
    def list_for_owner(self, db: Session, *, user_id: int, limit: int = 50) -> List[ReminderLog]:
        return (
            db.query(ReminderLog)
            .join(Recipient, ReminderLog.recipient_id == Recipient.id)
            .options(joinedload(ReminderLog.medication), joinedload(ReminderLog.recipient))
            .filter(Recipient.user_id == user_id)
            .order_by(ReminderLog.created_at.desc())
            .limit(limit)
            .all()
        )

    def count_scheduled_on(self, db: Session, *, user_id: int, day: date) -> int:
        start = datetime.combine(day, time.min)
        return (
            db.query(ReminderLog)
            .join(Recipient, ReminderLog.recipient_id == Recipient.id)
            .filter(
                Recipient.user_id == user_id,
                ReminderLog.scheduled_time >= start,
                ReminderLog.scheduled_time < start + timedelta(days=1),
            )
            .count()
        )

    def count_sent_since(self, db: Session, *, user_id: int, day: date) -> int:
        return (
            db.query(ReminderLog)
            .join(Recipient, ReminderLog.recipient_id == Recipient.id)
            .filter(
                Recipient.user_id == user_id,
                ReminderLog.status == ReminderStatus.SENT.value,
                ReminderLog.sent_time >= datetime.combine(day, time.min),
            )
            .count()
        )


reminder_log = CRUDReminderLog()
