from datetime import datetime
import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from medreminder.db.base_class import Base


DEFAULT_RECIPIENT_TIMEZONE = "America/New_York"


class Recipient(Base):
    """Person who receives the reminder emails"""
    __tablename__ = "recipients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    timezone = Column(String, nullable=False, default=DEFAULT_RECIPIENT_TIMEZONE)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="recipients")
    medications = relationship("Medication", back_populates="recipient", cascade="all, delete-orphan")
    reminder_logs = relationship("ReminderLog", back_populates="recipient", cascade="all, delete-orphan")
