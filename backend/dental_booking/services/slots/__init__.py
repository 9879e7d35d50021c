# backend/dental_booking/services/slots/__init__.py
"""
Slot availability engine.

Availability: weekday window × half-hour grid, minus past and booked slots
Commit: optimistic pre-check, unique index as the final word
"""

from .config import BookingConfig, get_booking_config
from .calendar import generate_bookable_dates, generate_day_slots
from .calculator import DayAvailability, compute_available_slots, is_day_over, load_day_availability
from .store import BookingStore, NewAppointment, SlotConflict, SqlBookingStore
from .booking import BookingAttempt, BookingState, CommitGuard, commit_booking

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "generate_bookable_dates",
    "generate_day_slots",
    "DayAvailability",
    "compute_available_slots",
    "is_day_over",
    "load_day_availability",
    "BookingStore",
    "NewAppointment",
    "SlotConflict",
    "SqlBookingStore",
    "BookingAttempt",
    "BookingState",
    "CommitGuard",
    "commit_booking",
]
