# backend/dental_booking/services/slots/booking.py
"""
Booking commit with optimistic pre-check.

State machine of one attempt:

    IDLE → VALIDATING → CONFLICT  → REJECTED
                      → INSERTING → COMMITTED | REJECTED | FAILED

✓ Pre-check (VALIDATING) only saves a round trip in the common case
✓ The store's unique index decides races (INSERTING → REJECTED)
✓ Any other store error → FAILED, safe to retry unchanged
✗ No retries, no slot locks, no cancellation of an in-flight commit
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from redis import Redis
from redis.exceptions import RedisError

from ..catalog import ServiceType
from ..pricing import consultation_quote
from .calendar import as_utc, to_utc_iso
from .errors import (
    BookingError,
    BookingFailed,
    CommitInProgress,
    MissingSelection,
    SlotAlreadyTaken,
    Unauthenticated,
)
from .store import BookingStore, NewAppointment, SlotConflict

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    CONFLICT = "conflict"
    INSERTING = "inserting"
    COMMITTED = "committed"
    REJECTED = "rejected"
    FAILED = "failed"


class CommitGuard:
    """
    Per-booking in-flight flag in Redis (SET NX EX).

    Stops a second commit of the same patient/dentist/instant while the
    first is outstanding. Not a slot lock: other patients are unaffected.
    """

    KEY_PREFIX = "booking:commit"

    def __init__(self, redis: Redis, ttl_seconds: int = 30):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, patient_id: str, dentist_id: int, instant: datetime) -> str:
        return f"{self.KEY_PREFIX}:{patient_id}:{dentist_id}:{to_utc_iso(instant)}"

    def acquire(self, patient_id: str, dentist_id: int, instant: datetime) -> Optional[str]:
        """
        Returns a release token, or None when another commit holds the key.

        If Redis is unreachable the guard is skipped and a token is returned;
        the database constraint still protects the slot.
        """
        key = self._key(patient_id, dentist_id, instant)
        token = secrets.token_hex(8)
        try:
            acquired = self.redis.set(key, token, nx=True, ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning(f"Commit guard unavailable, continuing without it: {e}")
            return token
        return token if acquired else None

    def release(self, patient_id: str, dentist_id: int, instant: datetime, token: str) -> None:
        key = self._key(patient_id, dentist_id, instant)
        try:
            current = self.redis.get(key)
            if isinstance(current, bytes):
                current = current.decode()
            if current == token:
                self.redis.delete(key)
        except RedisError as e:
            logger.warning(f"Commit guard release failed for {key}: {e}")


@dataclass
class BookingAttempt:
    """One commit of one selection; `state` ends in a terminal state."""
    store: BookingStore
    dentist: Any  # needs .id and .name
    service_type: Optional[ServiceType]
    instant: Optional[datetime]
    patient_id: Optional[str]
    notes: Optional[str] = None
    guard: Optional[CommitGuard] = None

    state: BookingState = BookingState.IDLE
    history: list[BookingState] = field(default_factory=list)
    appointment: Any = None
    error: Optional[BookingError] = None

    def _move(self, state: BookingState) -> None:
        self.history.append(state)
        self.state = state

    def _check_preconditions(self) -> None:
        missing = [
            name
            for name, value in (
                ("dentist", self.dentist),
                ("service", self.service_type),
                ("slot", self.instant),
            )
            if value is None
        ]
        if missing:
            raise MissingSelection(missing)
        if not self.patient_id:
            raise Unauthenticated()

    def commit(self):
        """
        Run the attempt.

        Returns:
            The inserted appointment.

        Raises:
            MissingSelection / Unauthenticated: preconditions, state stays IDLE
            CommitInProgress: same booking already in flight, state stays IDLE
            SlotAlreadyTaken: pre-check hit or unique index rejection
            BookingFailed: any other store error
        """
        if self.state is not BookingState.IDLE:
            raise RuntimeError(f"Attempt already ran (state={self.state.value})")

        self._check_preconditions()
        instant = as_utc(self.instant)

        token = None
        if self.guard is not None:
            token = self.guard.acquire(self.patient_id, self.dentist.id, instant)
            if token is None:
                logger.info(
                    f"Commit already in flight: patient_id={self.patient_id}, "
                    f"dentist_id={self.dentist.id}, start_at={to_utc_iso(instant)}"
                )
                raise CommitInProgress()

        try:
            return self._run(instant)
        finally:
            if token is not None:
                self.guard.release(self.patient_id, self.dentist.id, instant, token)

    def _run(self, instant: datetime):
        start_at = to_utc_iso(instant)

        # Step 1: optimistic pre-check
        self._move(BookingState.VALIDATING)
        try:
            taken = self.store.has_active_booking(self.dentist.id, instant)
        except Exception as e:
            logger.error(f"Pre-check failed: dentist_id={self.dentist.id}, start_at={start_at} → {e}")
            return self._fail(BookingFailed(), e)

        if taken:
            self._move(BookingState.CONFLICT)
            logger.info(f"Slot taken (pre-check): dentist_id={self.dentist.id}, start_at={start_at}")
            return self._reject()

        # Step 2: insert as confirmed
        self._move(BookingState.INSERTING)
        quote = consultation_quote()
        new = NewAppointment(
            patient_id=self.patient_id,
            dentist_id=self.dentist.id,
            dentist_name=self.dentist.name,
            start_at=instant,
            service_type=self.service_type.id,
            service_name=self.service_type.name,
            notes=self.notes or None,
            status="confirmed",
            amount_minor=quote.total_minor,
            currency=quote.currency,
        )
        try:
            appointment = self.store.insert_booking(new)
        except SlotConflict:
            # Step 3: race lost between pre-check and insert
            logger.warning(f"Slot taken (unique index): dentist_id={self.dentist.id}, start_at={start_at}")
            return self._reject()
        except Exception as e:
            # Step 4: unknown store error
            logger.error(f"Booking insert failed: dentist_id={self.dentist.id}, start_at={start_at} → {e}")
            return self._fail(BookingFailed(), e)

        self._move(BookingState.COMMITTED)
        self.appointment = appointment
        logger.info(
            f"Appointment booked: patient_id={self.patient_id}, "
            f"dentist_id={self.dentist.id}, start_at={start_at}, service={self.service_type.id}"
        )
        return appointment

    def _reject(self):
        self._move(BookingState.REJECTED)
        self.error = SlotAlreadyTaken()
        raise self.error

    def _fail(self, error: BookingFailed, cause: Exception):
        self._move(BookingState.FAILED)
        self.error = error
        raise error from cause


def commit_booking(
    store: BookingStore,
    dentist,
    service_type: Optional[ServiceType],
    instant: Optional[datetime],
    patient_id: Optional[str],
    notes: Optional[str] = None,
    guard: Optional[CommitGuard] = None,
):
    """Commit one booking; see `BookingAttempt.commit` for outcomes."""
    attempt = BookingAttempt(
        store=store,
        dentist=dentist,
        service_type=service_type,
        instant=instant,
        patient_id=patient_id,
        notes=notes,
        guard=guard,
    )
    return attempt.commit()
