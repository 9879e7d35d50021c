"""Tests for the SQLAlchemy booking store and the active-slot index."""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from dental_booking.models import Appointments, Dentists, Patients
from dental_booking.seed import seed_dentists
from dental_booking.services.slots import NewAppointment, SlotConflict, SqlBookingStore
from dental_booking.services.slots.calendar import day_bounds_utc
from dental_booking.services.slots.store import is_slot_conflict, is_unique_violation


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _new(start_at, dentist_id=1, patient_id="patient-1", status="confirmed"):
    return NewAppointment(
        patient_id=patient_id,
        dentist_id=dentist_id,
        dentist_name="Dr Hassan Bhojani",
        start_at=start_at,
        service_type="checkup",
        service_name="Dental Checkup",
        status=status,
    )


@pytest.fixture
def store(db):
    return SqlBookingStore(db)


class TestSqlBookingStore:

    def test_insert_stores_canonical_utc(self, store, db):
        obj = store.insert_booking(_new(datetime(2024, 6, 10, 11, 0, tzinfo=timezone.utc)))

        assert obj.id is not None
        assert obj.start_at == "2024-06-10T11:00:00Z"
        assert obj.status == "confirmed"
        assert db.get(Patients, "patient-1") is not None

    def test_fetch_only_active_in_range(self, store):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0)))
        store.insert_booking(_new(utc(2024, 6, 10, 9, 30), status="pending"))
        store.insert_booking(_new(utc(2024, 6, 10, 10, 0), status="cancelled"))
        store.insert_booking(_new(utc(2024, 6, 10, 10, 30), status="completed"))
        store.insert_booking(_new(utc(2024, 6, 11, 9, 0)))
        store.insert_booking(_new(utc(2024, 6, 10, 11, 0), dentist_id=2))

        start, end = day_bounds_utc(date(2024, 6, 10))
        booked = store.fetch_booked_instants(1, start, end)

        assert booked == [utc(2024, 6, 10, 9, 0), utc(2024, 6, 10, 9, 30)]

    def test_has_active_booking(self, store):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0)))
        store.insert_booking(_new(utc(2024, 6, 10, 9, 30), status="cancelled"))

        assert store.has_active_booking(1, utc(2024, 6, 10, 9, 0)) is True
        assert store.has_active_booking(1, utc(2024, 6, 10, 9, 30)) is False
        assert store.has_active_booking(2, utc(2024, 6, 10, 9, 0)) is False

    def test_duplicate_active_slot_rejected(self, store, db):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0), patient_id="patient-a"))

        with pytest.raises(SlotConflict):
            store.insert_booking(_new(utc(2024, 6, 10, 9, 0), patient_id="patient-b"))

        assert db.query(Appointments).count() == 1
        # Rolled back together with the appointment
        assert db.get(Patients, "patient-b") is None

    def test_inactive_rows_do_not_collide(self, store, db):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0), status="cancelled"))
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0), status="completed"))
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0)))

        assert db.query(Appointments).count() == 3

    def test_same_instant_other_dentist_allowed(self, store, db):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0), dentist_id=1))
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0), dentist_id=2))
        assert db.query(Appointments).count() == 2

    def test_foreign_key_error_is_not_a_conflict(self, store):
        with pytest.raises(IntegrityError):
            store.insert_booking(_new(utc(2024, 6, 10, 9, 0), dentist_id=999))

    def test_duplicate_patient_row_rolls_back(self, store, db, session_factory, monkeypatch):
        # Another request registers the same patient between lookup and flush
        other = session_factory()
        other.add(Patients(id="patient-race"))
        other.commit()
        other.close()

        real_get = db.get
        monkeypatch.setattr(
            db, "get",
            lambda model, key, **kw: None if model is Patients else real_get(model, key, **kw),
        )

        with pytest.raises(IntegrityError) as exc_info:
            store.insert_booking(_new(utc(2024, 6, 10, 9, 0), patient_id="patient-race"))

        assert "patients.id" in str(exc_info.value.orig)
        monkeypatch.undo()

        # Session was rolled back and is usable again
        obj = store.insert_booking(_new(utc(2024, 6, 10, 9, 0), patient_id="patient-race"))
        assert obj.patient_id == "patient-race"
        assert db.query(Appointments).count() == 1


class TestSlotConflictDetection:

    def test_slot_index_violation(self, store):
        store.insert_booking(_new(utc(2024, 6, 10, 9, 0)))
        with pytest.raises(SlotConflict) as exc_info:
            store.insert_booking(_new(utc(2024, 6, 10, 9, 0), patient_id="patient-2"))
        assert is_slot_conflict(exc_info.value.__cause__)

    def test_other_unique_violation_is_not_slot(self):
        err = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: patients.id"))
        assert is_unique_violation(err) is True
        assert is_slot_conflict(err) is False

    def test_postgres_index_name(self):
        class PgError(Exception):
            pgcode = "23505"

        err = IntegrityError(
            "INSERT", {},
            PgError('duplicate key value violates unique constraint "uq_appointments_active_slot"'),
        )
        assert is_slot_conflict(err) is True


class TestSeed:

    def test_seed_is_idempotent(self, db):
        assert seed_dentists(db) == 0
        assert db.query(Dentists).count() == 2
