# backend/dental_booking/services/slots/calculator.py
"""
Slot availability for one dentist on one date.

Steps:
  1. Enumerate the day grid (09:00 .. 16:30 UTC by default)
  2. Build each candidate instant: date + slot clock, UTC
  3. Drop past candidates when the date is today in the caller's zone
  4. Drop candidates whose UTC hour:minute matches an active booking
  5. Keep the rest in ascending order as "HH:MM" labels

Does NOT:
  ✗ cache anything (every call is a fresh snapshot)
  ✗ lock slots (conflicts are settled at commit time)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable

from .calendar import as_utc, day_bounds_utc, generate_day_slots, slot_instant, slot_label
from .config import BookingConfig, get_booking_config
from .errors import FetchFailed
from .store import BookingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayAvailability:
    """
    Available slots for a day.

    `fully_booked` is never a fetch failure, and never set when the list is
    empty only because every slot of today has already started (`day_over`).
    """
    dentist_id: int
    date: date
    available_times: list[str] = field(default_factory=list)
    day_over: bool = False

    @property
    def fully_booked(self) -> bool:
        return not self.available_times and not self.day_over


def is_day_over(
    target_date: date,
    now: datetime,
    tz: tzinfo = timezone.utc,
    config: BookingConfig | None = None,
) -> bool:
    """True when `target_date` is today in `tz` and its last slot has started."""
    now = as_utc(now)
    if target_date != now.astimezone(tz).date():
        return False
    last_hour, last_minute = generate_day_slots(config)[-1]
    return slot_instant(target_date, last_hour, last_minute) < now


def compute_available_slots(
    dentist_id: int,
    target_date: date,
    booked_instants: Iterable[datetime],
    now: datetime,
    tz: tzinfo = timezone.utc,
    config: BookingConfig | None = None,
) -> list[str]:
    """
    Available "HH:MM" labels for `dentist_id` on `target_date`.

    Args:
        booked_instants: active bookings of this dentist on this date
        now: current instant (naive = UTC)
        tz: caller's local zone, used only to decide "is today"

    Pure: identical inputs give identical output.
    """
    config = config or get_booking_config()
    now = as_utc(now)
    is_today = target_date == now.astimezone(tz).date()

    booked_clock = {
        (instant.hour, instant.minute)
        for instant in (as_utc(b) for b in booked_instants)
    }

    available: list[str] = []
    for hour, minute in generate_day_slots(config):
        candidate = slot_instant(target_date, hour, minute)

        if is_today and candidate < now:
            continue

        if (candidate.hour, candidate.minute) in booked_clock:
            continue

        available.append(slot_label(hour, minute))

    return available


def load_day_availability(
    store: BookingStore,
    dentist_id: int,
    target_date: date,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
    config: BookingConfig | None = None,
) -> DayAvailability:
    """
    Query the store for the day's active bookings and compute availability.

    Raises:
        FetchFailed: the store query failed (never reported as "no slots")
    """
    now = now or datetime.now(timezone.utc)
    start, end = day_bounds_utc(target_date)

    try:
        booked = store.fetch_booked_instants(dentist_id, start, end)
    except Exception as e:
        logger.error(
            f"Booked slots fetch failed: dentist_id={dentist_id}, "
            f"date={target_date.isoformat()} → {e}"
        )
        raise FetchFailed() from e

    available = compute_available_slots(
        dentist_id, target_date, booked, now, tz=tz, config=config
    )

    logger.info(
        f"Availability: dentist_id={dentist_id}, date={target_date.isoformat()}, "
        f"booked={len(booked)}, available={len(available)}"
    )

    return DayAvailability(
        dentist_id=dentist_id,
        date=target_date,
        available_times=available,
        day_over=is_day_over(target_date, now, tz=tz, config=config),
    )
