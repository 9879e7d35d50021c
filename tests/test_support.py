"""Tests for patient tokens, pricing and the event emitter."""

import json

from redis.exceptions import ConnectionError as RedisConnectionError

from dental_booking.auth import get_current_patient_id, sign_patient_token, verify_patient_token
from dental_booking.services.events import P2P_QUEUE, emit_event
from dental_booking.services.pricing import consultation_quote, to_minor_units


class TestPatientToken:

    def test_round_trip(self):
        token = sign_patient_token("user.with.dots", secret="s3cret")
        assert verify_patient_token(token, secret="s3cret") == "user.with.dots"

    def test_wrong_secret(self):
        token = sign_patient_token("patient-1", secret="a")
        assert verify_patient_token(token, secret="b") is None

    def test_malformed(self):
        assert verify_patient_token("no-signature") is None
        assert verify_patient_token(".abc") is None

    def test_header_dependency(self):
        token = sign_patient_token("patient-1")
        assert get_current_patient_id(f"Bearer {token}") == "patient-1"
        assert get_current_patient_id(f"Basic {token}") is None
        assert get_current_patient_id(None) is None


class TestPricing:

    def test_quote_total(self):
        quote = consultation_quote()
        assert quote.total == 24.99
        assert quote.total_minor == 2499

    def test_minor_units(self):
        assert to_minor_units(19.99) == 1999
        assert to_minor_units(5.0) == 500


class TestEvents:

    def test_pushes_to_queue(self, fake_redis):
        assert emit_event("appointment_booked", {"appointment_id": 7}, redis=fake_redis) is True

        event = json.loads(fake_redis.lists[P2P_QUEUE][0])
        assert event["type"] == "appointment_booked"
        assert event["appointment_id"] == 7
        assert "ts" in event

    def test_without_redis(self):
        assert emit_event("appointment_booked", {}) is False

    def test_redis_error_is_swallowed(self, fake_redis):
        def broken(*args):
            raise RedisConnectionError("redis down")

        fake_redis.rpush = broken
        assert emit_event("appointment_booked", {}, redis=fake_redis) is False
