# backend/dental_booking/services/slots/calendar.py
"""
Calendar helpers: bookable weekdays, the day slot grid and UTC instants.

Pure functions of the calendar, no I/O.
"""

from datetime import date, datetime, time, timedelta, timezone

from .config import BookingConfig, get_booking_config

WEEKEND = (5, 6)  # Saturday, Sunday

ISO_UTC_FMT = "%Y-%m-%dT%H:%M:%SZ"


def generate_bookable_dates(
    today: date | datetime,
    count: int | None = None,
    config: BookingConfig | None = None,
) -> list[date]:
    """
    Next `count` weekdays starting at `today` (inclusive).

    Saturdays and Sundays are skipped; a datetime is reduced to its date.
    """
    config = config or get_booking_config()
    if count is None:
        count = config.bookable_days
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    current = today.date() if isinstance(today, datetime) else today
    dates: list[date] = []
    while len(dates) < count:
        if current.weekday() not in WEEKEND:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def is_bookable_weekday(target_date: date) -> bool:
    return target_date.weekday() not in WEEKEND


def check_bookable_date(
    target_date: date,
    today: date,
    config: BookingConfig | None = None,
) -> None:
    """
    Raise ValueError unless `target_date` is inside the bookable window.

    ✗ before today
    ✗ Saturday / Sunday
    ✗ after the last of the next `bookable_days` weekdays
    """
    config = config or get_booking_config()
    if target_date < today:
        raise ValueError("Date cannot be in the past")
    if not is_bookable_weekday(target_date):
        raise ValueError("Appointments are only available on weekdays")
    window = generate_bookable_dates(today, config.bookable_days, config)
    if not window or target_date > window[-1]:
        raise ValueError(f"Date cannot be more than {config.bookable_days} weekdays ahead")


def generate_day_slots(config: BookingConfig | None = None) -> list[tuple[int, int]]:
    """
    Fixed (hour, minute) grid of the service window.

    Default config: 09:00 .. 16:30, 16 slots.
    """
    config = config or get_booking_config()
    step = config.slot_step_minutes
    slots = []
    t = config.window_start_hour * 60
    end = config.window_end_hour * 60
    while t < end:
        slots.append((t // 60, t % 60))
        t += step
    return slots


def slot_label(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def parse_slot_label(label: str) -> tuple[int, int]:
    """Parse "HH:MM" into (hour, minute)."""
    try:
        hours, minutes = label.split(":")
        hour, minute = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise ValueError(f"Time must be in HH:MM format, got {label!r}") from None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Time out of range: {label!r}")
    return hour, minute


def slot_instant(target_date: date, hour: int, minute: int) -> datetime:
    """Combine a date with a slot clock value; the clock is UTC."""
    return datetime.combine(target_date, time(hour, minute), tzinfo=timezone.utc)


def day_bounds_utc(target_date: date) -> tuple[datetime, datetime]:
    """Inclusive UTC start-of-day and end-of-day (23:59:59) for a date."""
    start = datetime.combine(target_date, time(0, 0, 0), tzinfo=timezone.utc)
    end = datetime.combine(target_date, time(23, 59, 59), tzinfo=timezone.utc)
    return start, end


def as_utc(dt: datetime) -> datetime:
    """Normalize to aware UTC; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc_iso(dt: datetime) -> str:
    """Canonical storage form, second precision: 2024-06-10T09:00:00Z."""
    return as_utc(dt).strftime(ISO_UTC_FMT)


def parse_utc_iso(value: str | datetime) -> datetime:
    """Parse a stored instant (any ISO-8601 form) into aware UTC."""
    if isinstance(value, datetime):
        return as_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))
