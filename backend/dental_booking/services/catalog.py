# backend/dental_booking/services/catalog.py
"""
Static reference data: consultation service types and dentist lookups.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Dentists


@dataclass(frozen=True)
class ServiceType:
    id: str
    name: str
    description: str


SERVICE_TYPES: dict[str, ServiceType] = {
    s.id: s
    for s in (
        ServiceType("checkup", "Dental Checkup", "Comprehensive oral examination and cleaning"),
        ServiceType("cleaning", "Teeth Cleaning", "Professional dental cleaning and polishing"),
        ServiceType("whitening", "Teeth Whitening", "Brighten your smile with professional whitening"),
        ServiceType("filling", "Dental Fillings", "Repair cavities and restore teeth"),
        ServiceType("extraction", "Tooth Extraction", "Safe and gentle tooth removal"),
        ServiceType("other", "Other", "Other dental services"),
    )
}


def get_service_type(service_id: Optional[str]) -> Optional[ServiceType]:
    if not service_id:
        return None
    return SERVICE_TYPES.get(service_id)


def list_service_types() -> list[ServiceType]:
    return list(SERVICE_TYPES.values())


def get_active_dentist(db: Session, dentist_id: int) -> Optional[Dentists]:
    """Get active dentist by ID."""
    return db.query(Dentists).filter(
        Dentists.id == dentist_id,
        Dentists.is_active == 1,
    ).first()


def list_active_dentists(db: Session) -> list[Dentists]:
    return (
        db.query(Dentists)
        .filter(Dentists.is_active == 1)
        .order_by(Dentists.id)
        .all()
    )
