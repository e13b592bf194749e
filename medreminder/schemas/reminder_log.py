from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel


class ReminderLog(BaseModel):
    id: UUID
    medication_id: UUID
    recipient_id: UUID
    scheduled_time: datetime
    sent_time: Optional[datetime] = None
    method: str
    status: str
    error_message: Optional[str] = None
    created_at: datetime
    medication_name: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_email: Optional[str] = None

    class Config:
        from_attributes = True
