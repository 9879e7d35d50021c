# backend/dental_booking/services/slots/config.py
"""
Booking configuration for slots calculation.

All slot clock values are UTC. A "09:00" slot is 09:00 UTC whatever the
patient's local zone is; the schedule has a single canonical clock.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slot availability engine.

    Attributes:
        window_start_hour: First slot of the service window (UTC hour)
        window_end_hour: Service window end, exclusive (UTC hour)
        slot_step_minutes: Grid step in minutes (15/30/60)
        bookable_days: How many weekdays ahead are offered
        join_before_minutes: Call can be joined this long before start
        join_after_minutes: Call can be joined this long after start
    """
    window_start_hour: int = 9
    window_end_hour: int = 17
    slot_step_minutes: int = 30  # 15 / 30 / 60
    bookable_days: int = 30
    join_before_minutes: int = 10
    join_after_minutes: int = 30

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if not 0 <= self.window_start_hour < self.window_end_hour <= 24:
            raise ValueError(
                f"invalid service window {self.window_start_hour}-{self.window_end_hour}"
            )

    @property
    def slots_per_day(self) -> int:
        """
        Number of slots in the service window.

        - 09-17 at 30 min → 16 slots
        """
        window_minutes = (self.window_end_hour - self.window_start_hour) * 60
        return window_minutes // self.slot_step_minutes


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton)."""
    return BookingConfig()
