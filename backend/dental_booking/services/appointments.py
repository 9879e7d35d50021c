# backend/dental_booking/services/appointments.py
"""
Patient-facing view of booked appointments: the next upcoming one,
whether its video call can be joined, and a countdown label.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ..models import ACTIVE_STATUSES, Appointments
from .slots.calendar import as_utc, parse_utc_iso, to_utc_iso
from .slots.config import BookingConfig, get_booking_config


def find_upcoming_appointment(
    db: Session,
    patient_id: str,
    now: datetime | None = None,
) -> Optional[Appointments]:
    """Earliest active appointment of the patient starting at or after now."""
    now = now or datetime.now(timezone.utc)
    return (
        db.query(Appointments)
        .filter(
            Appointments.patient_id == patient_id,
            Appointments.status.in_(ACTIVE_STATUSES),
            Appointments.start_at >= to_utc_iso(now),
        )
        .order_by(Appointments.start_at)
        .first()
    )


def _minutes_until(start_at: datetime, now: datetime) -> int:
    diff = (as_utc(start_at) - as_utc(now)).total_seconds()
    return math.floor(diff / 60)


def can_join_call(
    start_at: datetime | str,
    now: datetime,
    config: BookingConfig | None = None,
) -> bool:
    """Joinable from `join_before_minutes` before start to `join_after_minutes` after."""
    config = config or get_booking_config()
    minutes = _minutes_until(parse_utc_iso(start_at), now)
    return -config.join_after_minutes <= minutes <= config.join_before_minutes


def time_remaining_label(start_at: datetime | str, now: datetime) -> str:
    start = parse_utc_iso(start_at)
    if (start - as_utc(now)).total_seconds() <= 0:
        return "Starting now!"

    minutes = _minutes_until(start, now)
    hours = minutes // 60
    if hours > 24:
        days = hours // 24
        return f"in {days} day{'s' if days > 1 else ''}"
    if hours > 0:
        return f"in {hours}h {minutes % 60}m"
    return f"in {minutes} minute{'s' if minutes != 1 else ''}"
