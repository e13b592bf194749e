from datetime import datetime
import enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from medreminder.db.base_class import Base


class ReminderStatus(str, enum.Enum):
    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


class ReminderMethod(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"


class ReminderLog(Base):
    """One record per attempted reminder occurrence"""
    __tablename__ = "reminder_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    medication_id = Column(Uuid, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Uuid, ForeignKey("recipients.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_time = Column(DateTime, nullable=False, index=True)
    sent_time = Column(DateTime, nullable=True)
    method = Column(String, nullable=False, default=ReminderMethod.EMAIL.value)
    status = Column(String, nullable=False, default=ReminderStatus.PENDING.value, index=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    medication = relationship("Medication", back_populates="reminder_logs")
    recipient = relationship("Recipient", back_populates="reminder_logs")

    __table_args__ = (
        # Deduplication key: one log per dose occurrence
        UniqueConstraint("medication_id", "scheduled_time", name="uq_reminder_logs_medication_scheduled"),
        CheckConstraint("method IN ('email', 'sms')", name="ck_reminder_logs_method"),
        CheckConstraint("status IN ('sent', 'failed', 'pending')", name="ck_reminder_logs_status"),
        Index("ix_reminder_logs_recipient_scheduled", "recipient_id", "scheduled_time"),
    )

    @property
    def medication_name(self):
        return self.medication.name if self.medication else None

    @property
    def recipient_name(self):
        return self.recipient.name if self.recipient else None

    @property
    def recipient_email(self):
        return self.recipient.email if self.recipient else None
