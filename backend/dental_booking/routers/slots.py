# backend/dental_booking/routers/slots.py
"""
Slots API endpoints.

GET /slots/dates - Bookable weekdays (next 30, today inclusive)
GET /slots/day   - Available times of a dentist on a day

Clients re-request /slots/day whenever the screen regains focus or the
selected date/dentist changes; every call is a fresh store query.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import BookableDatesResponse, SlotsDayResponse
from ..services.catalog import get_active_dentist
from ..services.slots import (
    SqlBookingStore,
    generate_bookable_dates,
    get_booking_config,
    load_day_availability,
)
from ..services.slots.calendar import check_bookable_date
from ..services.slots.errors import FetchFailed


router = APIRouter(prefix="/slots", tags=["slots"])


def _resolve_zone(tz_name: str):
    if tz_name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone: {tz_name}") from None


@router.get("/dates", response_model=BookableDatesResponse)
def get_bookable_dates(
    tz: str = "UTC",
):
    """Next bookable weekdays, counted from today in the caller's zone."""
    config = get_booking_config()
    zone = _resolve_zone(tz)
    today = datetime.now(timezone.utc).astimezone(zone).date()

    return BookableDatesResponse(
        today=today,
        dates=generate_bookable_dates(today, config.bookable_days, config),
    )


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    dentist_id: int,
    target_date: date = Query(..., alias="date"),
    tz: str = "UTC",
    db: Session = Depends(get_db),
):
    """Get available time slots of a dentist on a specific day."""
    config = get_booking_config()
    zone = _resolve_zone(tz)
    now = datetime.now(timezone.utc)
    today = now.astimezone(zone).date()

    try:
        check_bookable_date(target_date, today, config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    dentist = get_active_dentist(db, dentist_id)
    if not dentist:
        raise HTTPException(status_code=404, detail="Dentist not found")

    try:
        availability = load_day_availability(
            SqlBookingStore(db), dentist.id, target_date, now=now, tz=zone, config=config
        )
    except FetchFailed as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.to_detail(),
        ) from None

    return SlotsDayResponse(
        dentist_id=dentist.id,
        dentist_name=dentist.name,
        date=target_date,
        available_times=availability.available_times,
        fully_booked=availability.fully_booked,
        day_over=availability.day_over,
        slot_step_minutes=config.slot_step_minutes,
    )
