# backend/dental_booking/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel, Field


class BookableDatesResponse(BaseModel):
    """Weekdays offered for booking."""
    today: date
    dates: list[date]

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Available slots of one dentist on one day."""
    dentist_id: int
    dentist_name: str
    date: date
    available_times: list[str] = Field(description='"HH:MM" labels, UTC schedule clock')
    fully_booked: bool = Field(description="Every remaining slot is taken; a failed fetch is a 503 instead")
    day_over: bool = Field(False, description="Today and every slot has already started")

    # Metadata
    timezone: str = "UTC"
    slot_step_minutes: int

    model_config = {"from_attributes": True}
