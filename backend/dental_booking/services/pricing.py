# backend/dental_booking/services/pricing.py
"""
Consultation price quote.

Every video consultation costs the same: appointment fee + additional fee.
Amounts are carried in minor units (pence) for the payment provider.
"""

from dataclasses import dataclass

APPOINTMENT_FEE = 19.99
ADDITIONAL_FEE = 5.00
CURRENCY = "gbp"


@dataclass(frozen=True)
class Quote:
    appointment_fee: float
    additional_fee: float
    currency: str

    @property
    def total(self) -> float:
        return round(self.appointment_fee + self.additional_fee, 2)

    @property
    def total_minor(self) -> int:
        return to_minor_units(self.total)


def to_minor_units(amount: float) -> int:
    """19.99 → 1999"""
    return int(round(amount * 100))


def consultation_quote() -> Quote:
    return Quote(
        appointment_fee=APPOINTMENT_FEE,
        additional_fee=ADDITIONAL_FEE,
        currency=CURRENCY,
    )
