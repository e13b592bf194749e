from datetime import datetime
import enum
import uuid

from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, ForeignKey, JSON, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from medreminder.db.base_class import Base


class MedicationFrequency(str, enum.Enum):
    ONCE_DAILY = "once_daily"
    TWICE_DAILY = "twice_daily"
    THREE_TIMES_DAILY = "three_times_daily"
    FOUR_TIMES_DAILY = "four_times_daily"
    CUSTOM = "custom"


# Times offered when a medication is created without explicit times
FREQUENCY_DEFAULT_TIMES = {
    MedicationFrequency.ONCE_DAILY: ["08:00"],
    MedicationFrequency.TWICE_DAILY: ["08:00", "20:00"],
    MedicationFrequency.THREE_TIMES_DAILY: ["08:00", "14:00", "20:00"],
    MedicationFrequency.FOUR_TIMES_DAILY: ["08:00", "12:00", "16:00", "20:00"],
    MedicationFrequency.CUSTOM: ["08:00"],
}


class Medication(Base):
    """Dosing schedule for one recipient"""
    __tablename__ = "medications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_id = Column(Uuid, ForeignKey("recipients.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    times = Column(JSON, nullable=False, default=list)  # ["08:00", "20:00"], recipient-local
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    recipient = relationship("Recipient", back_populates="medications")
    reminder_logs = relationship("ReminderLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "frequency IN ('once_daily', 'twice_daily', 'three_times_daily', 'four_times_daily', 'custom')",
            name="ck_medications_frequency",
        ),
        CheckConstraint("start_date <= end_date", name="ck_medications_date_range"),
        Index("ix_medications_active_range", "is_active", "start_date", "end_date"),
    )

    @property
    def recipient_name(self):
        return self.recipient.name if self.recipient else None

    @property
    def recipient_email(self):
        return self.recipient.email if self.recipient else None
