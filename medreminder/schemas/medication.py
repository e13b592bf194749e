from typing import List, Optional
from uuid import UUID
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from medreminder.models.medication import MedicationFrequency
from medreminder.utils.timezone import parse_hhmm


def _validate_times(times: Optional[List[str]]) -> Optional[List[str]]:
    if times is None:
        return None
    if not times:
        raise ValueError("At least one time is required")
    normalized = []
    for t in times:
        parsed = parse_hhmm(t.strip())
        normalized.append(parsed.strftime("%H:%M"))
    return normalized


class MedicationBase(BaseModel):
    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: MedicationFrequency
    start_date: date
    end_date: date
    notes: Optional[str] = None


class MedicationCreate(MedicationBase):
    recipient_id: UUID
    # Falls back to the frequency's default times when omitted
    times: Optional[List[str]] = None

    @field_validator("times")
    @classmethod
    def check_times(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_times(v)

    @model_validator(mode="after")
    def _check_range(self) -> "MedicationCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class MedicationUpdate(BaseModel):
    recipient_id: Optional[UUID] = None
    name: Optional[str] = Field(None, min_length=1)
    dosage: Optional[str] = Field(None, min_length=1)
    frequency: Optional[MedicationFrequency] = None
    times: Optional[List[str]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("times")
    @classmethod
    def check_times(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_times(v)


class Medication(MedicationBase):
    id: UUID
    recipient_id: UUID
    times: List[str]
    is_active: bool
    created_at: datetime
    recipient_name: Optional[str] = None
    recipient_email: Optional[str] = None

    class Config:
        from_attributes = True


class FrequencyOption(BaseModel):
    value: MedicationFrequency
    default_times: List[str]
