"""Tests for upcoming appointment lookup, call window and countdown label."""

from datetime import datetime, timedelta, timezone

import pytest

from dental_booking.services.appointments import (
    can_join_call,
    find_upcoming_appointment,
    time_remaining_label,
)
from dental_booking.services.slots import NewAppointment, SqlBookingStore

START = datetime(2024, 6, 10, 10, 0, tzinfo=timezone.utc)


def _book(db, start_at, patient_id="patient-1", status="confirmed", dentist_id=1):
    return SqlBookingStore(db).insert_booking(
        NewAppointment(
            patient_id=patient_id,
            dentist_id=dentist_id,
            dentist_name="Dr Hassan Bhojani",
            start_at=start_at,
            service_type="cleaning",
            service_name="Teeth Cleaning",
            status=status,
        )
    )


class TestFindUpcoming:

    def test_earliest_active_future(self, db):
        _book(db, START - timedelta(days=1))
        _book(db, START + timedelta(hours=1), status="cancelled")
        later = _book(db, START + timedelta(days=2))
        sooner = _book(db, START + timedelta(hours=3), dentist_id=2)
        _book(db, START + timedelta(hours=2), patient_id="patient-2")

        found = find_upcoming_appointment(db, "patient-1", now=START)

        assert found.id == sooner.id
        assert found.id != later.id

    def test_starting_now_counts(self, db):
        booked = _book(db, START)
        assert find_upcoming_appointment(db, "patient-1", now=START).id == booked.id

    def test_none(self, db):
        _book(db, START - timedelta(minutes=1))
        assert find_upcoming_appointment(db, "patient-1", now=START) is None


class TestCanJoinCall:

    @pytest.mark.parametrize("minutes_before,expected", [
        (11, False),
        (10, True),
        (0, True),
        (-30, True),
        (-31, False),
    ])
    def test_window(self, minutes_before, expected):
        now = START - timedelta(minutes=minutes_before)
        assert can_join_call(START, now) is expected

    def test_accepts_stored_text(self):
        now = START - timedelta(minutes=5)
        assert can_join_call("2024-06-10T10:00:00Z", now) is True


class TestTimeRemainingLabel:

    @pytest.mark.parametrize("delta,label", [
        (timedelta(0), "Starting now!"),
        (timedelta(minutes=-5), "Starting now!"),
        (timedelta(minutes=1), "in 1 minute"),
        (timedelta(minutes=45), "in 45 minutes"),
        (timedelta(hours=2, minutes=15), "in 2h 15m"),
        (timedelta(hours=24), "in 24h 0m"),
        (timedelta(hours=49), "in 2 days"),
    ])
    def test_labels(self, delta, label):
        assert time_remaining_label(START, START - delta) == label
