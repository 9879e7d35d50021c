# backend/dental_booking/auth.py
"""
Patient session tokens.

Sign-in happens at the external identity provider; this service only checks
a signed token naming the patient:

    Authorization: Bearer <patient_id>.<hex hmac-sha256(patient_id)>
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import Header

from .config import settings

logger = logging.getLogger(__name__)


def _signature(patient_id: str, secret: str) -> str:
    return hmac.new(secret.encode(), patient_id.encode(), hashlib.sha256).hexdigest()


def sign_patient_token(patient_id: str, secret: Optional[str] = None) -> str:
    secret = secret or settings.auth_secret
    return f"{patient_id}.{_signature(patient_id, secret)}"


def verify_patient_token(token: str, secret: Optional[str] = None) -> Optional[str]:
    """Return the patient id, or None if the token is malformed or forged."""
    secret = secret or settings.auth_secret
    patient_id, sep, received = token.rpartition(".")
    if not sep or not patient_id or not received:
        return None
    if not hmac.compare_digest(_signature(patient_id, secret), received):
        return None
    return patient_id


# FastAPI dependency: None means "not authenticated"
def get_current_patient_id(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    patient_id = verify_patient_token(token.strip())
    if patient_id is None:
        logger.warning("Rejected invalid patient token")
    return patient_id
