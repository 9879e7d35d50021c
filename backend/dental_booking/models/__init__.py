from .tables import (
    ACTIVE_SLOT_INDEX,
    ACTIVE_STATUSES,
    Appointments,
    Base,
    Dentists,
    Patients,
    metadata,
)

__all__ = [
    "ACTIVE_SLOT_INDEX",
    "ACTIVE_STATUSES",
    "Appointments",
    "Base",
    "Dentists",
    "Patients",
    "metadata",
]
