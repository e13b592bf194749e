from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ReminderRequest(BaseModel):
    """Body of the send-reminder function; camelCase on the wire"""
    model_config = ConfigDict(populate_by_name=True)

    medication_id: UUID = Field(..., alias="medicationId")
    recipient_email: EmailStr = Field(..., alias="recipientEmail")
    recipient_name: str = Field(..., alias="recipientName")
    medication_name: str = Field(..., alias="medicationName")
    dosage: str
    scheduled_time: datetime = Field(..., alias="scheduledTime")

    @field_validator("scheduled_time")
    @classmethod
    def wall_clock(cls, v: datetime) -> datetime:
        # The occurrence is a recipient-local wall-clock time; an offset is dropped, not applied
        return v.replace(tzinfo=None)


class SendReminderResponse(BaseModel):
    success: bool
    message: str
    email: str
    medication: str


class ScheduleRunResult(BaseModel):
    success: bool = True
    timestamp: datetime
    remindersProcessed: int = 0
    remindersSent: int = 0
    errors: Optional[List[str]] = None


class FunctionError(BaseModel):
    success: bool = False
    error: str
