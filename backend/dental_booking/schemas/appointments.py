# backend/dental_booking/schemas/appointments.py

import re
import datetime as dt
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class AppointmentCreate(BaseModel):
    """Selection from the booking screen; fields may be missing until chosen."""
    service_type: Optional[str] = None
    dentist_id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, description="Slot in HH:MM format")
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        """Validate time format."""
        if v is not None and not re.match(r"^\d{2}:\d{2}$", v):
            raise ValueError("Time must be in HH:MM format")
        return v


class AppointmentRead(BaseModel):
    id: int
    patient_id: str
    dentist_id: int
    dentist_name: str
    start_at: datetime
    status: str
    service_type: str
    service_name: str
    notes: Optional[str] = None
    amount_minor: Optional[int] = None
    currency: Optional[str] = None

    model_config = {"from_attributes": True}


class UpcomingAppointmentResponse(BaseModel):
    appointment: Optional[AppointmentRead] = None
    can_join_call: bool = False
    time_remaining: Optional[str] = None
