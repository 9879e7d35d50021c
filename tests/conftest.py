import os
import threading
from types import SimpleNamespace

# Must be set before dental_booking.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dental_booking.auth import sign_patient_token
from dental_booking.database import get_db, make_engine
from dental_booking.main import app
from dental_booking.models import ACTIVE_STATUSES
from dental_booking.redis_client import get_redis
from dental_booking.seed import create_schema, seed_dentists
from dental_booking.services.slots.calendar import as_utc
from dental_booking.services.slots.store import SlotConflict


class InMemoryBookingStore:
    """BookingStore fake with the same uniqueness rule as the database."""

    def __init__(self):
        self.rows = []
        self.fail_fetch = None
        self.fail_insert = None
        self.stale_precheck = False
        self.fetch_calls = 0
        self._lock = threading.Lock()

    def add(self, dentist_id, start_at, status="confirmed", patient_id="someone"):
        row = SimpleNamespace(
            id=len(self.rows) + 1,
            patient_id=patient_id,
            dentist_id=dentist_id,
            start_at=as_utc(start_at),
            status=status,
        )
        self.rows.append(row)
        return row

    def _active(self, dentist_id, instant):
        return [
            r for r in self.rows
            if r.dentist_id == dentist_id
            and r.start_at == as_utc(instant)
            and r.status in ACTIVE_STATUSES
        ]

    def fetch_booked_instants(self, dentist_id, start, end):
        self.fetch_calls += 1
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return sorted(
            r.start_at for r in self.rows
            if r.dentist_id == dentist_id
            and r.status in ACTIVE_STATUSES
            and as_utc(start) <= r.start_at <= as_utc(end)
        )

    def has_active_booking(self, dentist_id, instant):
        if self.stale_precheck:
            return False
        return bool(self._active(dentist_id, instant))

    def insert_booking(self, appointment):
        if self.fail_insert is not None:
            raise self.fail_insert
        with self._lock:
            if self._active(appointment.dentist_id, appointment.start_at):
                raise SlotConflict(f"dentist_id={appointment.dentist_id}")
            row = SimpleNamespace(id=len(self.rows) + 1, **vars(appointment))
            row.start_at = as_utc(row.start_at)
            self.rows.append(row)
            return row


class FakeRedis:
    """Just enough of redis.Redis for the commit guard and event queue."""

    def __init__(self):
        self.data = {}
        self.lists = {}
        self.expirations = {}

    def set(self, key, value, nx=False, ex=None):
        if nx and key in self.data:
            return None
        self.data[key] = value
        if ex is not None:
            self.expirations[key] = ex
        return True

    def get(self, key):
        return self.data.get(key)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def ping(self):
        return True


@pytest.fixture
def memory_store():
    return InMemoryBookingStore()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def dentist():
    return SimpleNamespace(id=1, name="Dr A")


@pytest.fixture
def engine():
    eng = make_engine(
        "sqlite://",
        poolclass=StaticPool,
    )
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_dentists(session)
    yield session
    session.close()


@pytest.fixture
def client(db, session_factory, fake_redis):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(patient_id="patient-1"):
        return {"Authorization": f"Bearer {sign_patient_token(patient_id)}"}
    return make
