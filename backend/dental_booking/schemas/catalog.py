# backend/dental_booking/schemas/catalog.py

from typing import Optional
from pydantic import BaseModel


class ServiceTypeRead(BaseModel):
    id: str
    name: str
    description: str

    model_config = {"from_attributes": True}


class DentistRead(BaseModel):
    id: int
    name: str
    specialty: Optional[str] = None
    availability_label: Optional[str] = None
    rating: Optional[float] = None
    photo_url: Optional[str] = None

    model_config = {"from_attributes": True}


class QuoteRead(BaseModel):
    appointment_fee: float
    additional_fee: float
    total: float
    total_minor: int
    currency: str

    model_config = {"from_attributes": True}
