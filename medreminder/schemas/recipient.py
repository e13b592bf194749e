from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from medreminder.models.recipient import DEFAULT_RECIPIENT_TIMEZONE
from medreminder.utils.timezone import is_valid_timezone


class RecipientBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    timezone: str = DEFAULT_RECIPIENT_TIMEZONE

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        if not is_valid_timezone(v):
            raise ValueError(f"Unknown timezone {v!r}")
        return v


class RecipientCreate(RecipientBase):
    pass


class RecipientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_timezone(v):
            raise ValueError(f"Unknown timezone {v!r}")
        return v


class Recipient(RecipientBase):
    id: UUID
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True
