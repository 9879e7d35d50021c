# backend/dental_booking/services/slots/store.py
"""
Booking store boundary.

The engine only talks to the narrow `BookingStore` protocol:
  fetch_booked_instants() - active start instants for a dentist in a range
  has_active_booking()    - exact dentist + instant lookup (pre-check)
  insert_booking()        - single insert; SlotConflict on uniqueness

The database's partial unique index is the authority on conflicts.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import ACTIVE_SLOT_INDEX, ACTIVE_STATUSES, Appointments, Patients
from .calendar import parse_utc_iso, to_utc_iso

logger = logging.getLogger(__name__)

# Postgres unique_violation SQLSTATE
UNIQUE_VIOLATION_CODE = "23505"


class SlotConflict(Exception):
    """The store rejected an insert on the active-slot uniqueness constraint."""


@dataclass(frozen=True)
class NewAppointment:
    patient_id: str
    dentist_id: int
    dentist_name: str
    start_at: datetime
    service_type: str
    service_name: str
    notes: Optional[str] = None
    status: str = "confirmed"
    amount_minor: Optional[int] = None
    currency: Optional[str] = None


class BookingStore(Protocol):
    def fetch_booked_instants(
        self, dentist_id: int, start: datetime, end: datetime
    ) -> list[datetime]: ...

    def has_active_booking(self, dentist_id: int, instant: datetime) -> bool: ...

    def insert_booking(self, appointment: NewAppointment): ...


class SqlBookingStore:
    """BookingStore over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_booked_instants(
        self,
        dentist_id: int,
        start: datetime,
        end: datetime,
    ) -> list[datetime]:
        """Active (pending/confirmed) start instants in [start, end], UTC."""
        rows = (
            self.db.query(Appointments.start_at)
            .filter(
                Appointments.dentist_id == dentist_id,
                Appointments.start_at >= to_utc_iso(start),
                Appointments.start_at <= to_utc_iso(end),
                Appointments.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Appointments.start_at)
            .all()
        )
        return [parse_utc_iso(row.start_at) for row in rows]

    def has_active_booking(self, dentist_id: int, instant: datetime) -> bool:
        found = (
            self.db.query(Appointments.id)
            .filter(
                Appointments.dentist_id == dentist_id,
                Appointments.start_at == to_utc_iso(instant),
                Appointments.status.in_(ACTIVE_STATUSES),
            )
            .first()
        )
        return found is not None

    def insert_booking(self, appointment: NewAppointment) -> Appointments:
        """
        Insert one appointment in its own transaction.

        Raises:
            SlotConflict: active-slot unique index rejected the row
            SQLAlchemyError: anything else (transaction rolled back)
        """
        obj = Appointments(
            patient_id=appointment.patient_id,
            dentist_id=appointment.dentist_id,
            dentist_name=appointment.dentist_name,
            start_at=to_utc_iso(appointment.start_at),
            status=appointment.status,
            service_type=appointment.service_type,
            service_name=appointment.service_name,
            notes=appointment.notes,
            amount_minor=appointment.amount_minor,
            currency=appointment.currency,
        )
        try:
            self._ensure_patient(appointment.patient_id)
            self.db.add(obj)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_slot_conflict(e):
                raise SlotConflict(
                    f"dentist_id={appointment.dentist_id} start_at={to_utc_iso(appointment.start_at)}"
                ) from e
            raise
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(obj)
        return obj

    def _ensure_patient(self, patient_id: str) -> None:
        """Patients are authenticated elsewhere; keep a local row for the FK."""
        if self.db.get(Patients, patient_id) is None:
            self.db.add(Patients(id=patient_id))
            self.db.flush()
            logger.info(f"Registered patient locally: patient_id={patient_id}")


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique-constraint violations, False for FK/NOT NULL etc."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_CODE
    return "UNIQUE constraint failed" in str(orig)


def is_slot_conflict(exc: IntegrityError) -> bool:
    """
    Unique violation on the active-slot index only.

    A duplicate patient row (two first bookings of one patient at once) is a
    unique violation too, but says nothing about the slot.
    """
    if not is_unique_violation(exc):
        return False
    message = str(getattr(exc, "orig", exc))
    # Postgres names the index; SQLite lists the indexed columns
    return ACTIVE_SLOT_INDEX in message or "appointments.dentist_id, appointments.start_at" in message
