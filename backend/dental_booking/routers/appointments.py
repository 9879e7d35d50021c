# backend/dental_booking/routers/appointments.py
"""
Appointment endpoints for the booking and home screens.

POST /appointments          - Commit the selected slot (auth required)
GET  /appointments/upcoming - Patient's next appointment and call window
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..auth import get_current_patient_id
from ..config import settings
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.appointments import (
    AppointmentCreate,
    AppointmentRead,
    UpcomingAppointmentResponse,
)
from ..services.appointments import (
    can_join_call,
    find_upcoming_appointment,
    time_remaining_label,
)
from ..services.catalog import get_active_dentist, get_service_type
from ..services.events import emit_event
from ..services.slots import CommitGuard, SqlBookingStore, commit_booking, generate_day_slots
from ..services.slots.calendar import check_bookable_date, parse_slot_label, slot_instant
from ..services.slots.errors import (
    BookingError,
    BookingFailed,
    CommitInProgress,
    MissingSelection,
    SlotAlreadyTaken,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])

ERROR_STATUS: dict[type[BookingError], int] = {
    MissingSelection: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    SlotAlreadyTaken: status.HTTP_409_CONFLICT,
    CommitInProgress: status.HTTP_409_CONFLICT,
    BookingFailed: status.HTTP_502_BAD_GATEWAY,
}


def _http_error(err: BookingError) -> HTTPException:
    code = ERROR_STATUS.get(type(err), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=code, detail=err.to_detail())


@router.post("/", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    patient_id: Optional[str] = Depends(get_current_patient_id),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    """
    Book the selected slot.

    Steps:
    1. Resolve service type and dentist
    2. Build the UTC start instant from date + "HH:MM"; only bookable
       dates and slots not yet started are accepted
    3. Commit (pre-check → insert → unique index)
    4. Emit appointment_booked

    On 409 slot_already_taken the client clears its selection and reloads
    /slots/day.
    """
    # Step 1: Resolve selection
    service_type = get_service_type(data.service_type)
    if data.service_type and service_type is None:
        raise HTTPException(status_code=400, detail="Unknown service type")

    dentist = None
    if data.dentist_id is not None:
        dentist = get_active_dentist(db, data.dentist_id)
        if not dentist:
            raise HTTPException(status_code=404, detail="Dentist not found")

    # Step 2: Slot instant (UTC schedule clock)
    instant = None
    if data.date is not None and data.time is not None:
        now = datetime.now(timezone.utc)
        try:
            check_bookable_date(data.date, now.date())
            hour, minute = parse_slot_label(data.time)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from None
        if (hour, minute) not in generate_day_slots():
            raise HTTPException(status_code=400, detail=f"{data.time} is not a bookable slot")
        instant = slot_instant(data.date, hour, minute)
        if instant < now:
            raise HTTPException(status_code=400, detail="This time slot has already passed")

    # Step 3: Commit
    guard = CommitGuard(redis, settings.commit_guard_ttl) if redis is not None else None
    try:
        appointment = commit_booking(
            SqlBookingStore(db),
            dentist,
            service_type,
            instant,
            patient_id,
            notes=data.notes,
            guard=guard,
        )
    except BookingError as e:
        raise _http_error(e) from None

    # Step 4: Notify
    emit_event("appointment_booked", {
        "appointment_id": appointment.id,
        "patient_id": appointment.patient_id,
        "dentist_id": appointment.dentist_id,
        "start_at": appointment.start_at,
    }, redis=redis)

    return appointment


@router.get("/upcoming", response_model=UpcomingAppointmentResponse)
def get_upcoming_appointment(
    patient_id: Optional[str] = Depends(get_current_patient_id),
    db: Session = Depends(get_db),
):
    """Next active appointment of the signed-in patient."""
    if not patient_id:
        raise _http_error(Unauthenticated())

    now = datetime.now(timezone.utc)
    appointment = find_upcoming_appointment(db, patient_id, now)
    if appointment is None:
        return UpcomingAppointmentResponse()

    return UpcomingAppointmentResponse(
        appointment=appointment,
        can_join_call=can_join_call(appointment.start_at, now),
        time_remaining=time_remaining_label(appointment.start_at, now),
    )
