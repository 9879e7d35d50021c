# backend/dental_booking/routers/catalog.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.catalog import DentistRead, QuoteRead, ServiceTypeRead
from ..services.catalog import list_active_dentists, list_service_types
from ..services.pricing import consultation_quote

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/services", response_model=list[ServiceTypeRead])
def list_services():
    return list_service_types()


@router.get("/dentists", response_model=list[DentistRead])
def list_dentists(db: Session = Depends(get_db)):
    return list_active_dentists(db)


@router.get("/quote", response_model=QuoteRead)
def get_quote():
    """Price of one video consultation."""
    quote = consultation_quote()
    return QuoteRead(
        appointment_fee=quote.appointment_fee,
        additional_fee=quote.additional_fee,
        total=quote.total,
        total_minor=quote.total_minor,
        currency=quote.currency,
    )
