"""Error kinds raised by the slot engine and booking commit."""


class BookingError(Exception):
    """Base class; `kind` is the stable identifier shown to clients."""

    kind = "booking_error"
    default_message = "Booking error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_detail(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class MissingSelection(BookingError):
    """Dentist, service, date or slot not chosen yet."""

    kind = "missing_selection"
    default_message = "Please select all required fields"

    def __init__(self, missing: list[str] | None = None, message: str | None = None):
        self.missing = missing or []
        if message is None and self.missing:
            message = f"Missing selection: {', '.join(self.missing)}"
        super().__init__(message)

    def to_detail(self) -> dict:
        return {**super().to_detail(), "missing": self.missing}


class Unauthenticated(BookingError):
    kind = "unauthenticated"
    default_message = "Sign in to book an appointment"


class SlotAlreadyTaken(BookingError):
    kind = "slot_already_taken"
    default_message = (
        "This time slot was just booked by another patient. "
        "Please select a different time."
    )


class CommitInProgress(BookingError):
    """Same booking is already being committed."""

    kind = "commit_in_progress"
    default_message = "This booking is already being processed"


class FetchFailed(BookingError):
    """Availability query failed; not the same as a fully booked day."""

    kind = "fetch_failed"
    default_message = "Failed to load slots. Please try again."


class BookingFailed(BookingError):
    kind = "booking_failed"
    default_message = "Failed to book appointment. Please try again."
