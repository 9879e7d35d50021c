# backend/dental_booking/seed.py
"""
Bootstrap: create tables and seed the dentist roster.

Usage:
    python -m dental_booking.seed
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .models import Base, Dentists

logger = logging.getLogger(__name__)


# ======================================================
# ROSTER
# ======================================================

DENTISTS = [
    {
        "id": 1,
        "name": "Dr Hassan Bhojani",
        "specialty": "General Dentistry",
        "availability_label": "Mon-Fri",
        "rating": 4.9,
        "photo_url": "https://res.cloudinary.com/dv5noi9zl/image/upload/v1764609933/1000025959_5_du0uls.jpg",
    },
    {
        "id": 2,
        "name": "Dr Cosimo Meucci",
        "specialty": "Orthodontics",
        "availability_label": "Mon, Wed, Fri",
        "rating": 4.8,
        "photo_url": "https://res.cloudinary.com/dv5noi9zl/image/upload/v1764609934/1000025960_4_lhingy.jpg",
    },
]


# ======================================================
# MAIN LOGIC
# ======================================================

def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def seed_dentists(db: Session, roster: list[dict] | None = None) -> int:
    """Insert missing dentists by id; existing rows are left untouched."""
    roster = DENTISTS if roster is None else roster
    added = 0
    for entry in roster:
        if db.get(Dentists, entry["id"]) is not None:
            continue
        db.add(Dentists(**entry))
        added += 1
    db.commit()
    if added:
        logger.info(f"[BOOTSTRAP] Seeded {added} dentist(s)")
    else:
        logger.info("[BOOTSTRAP] Dentists already present, nothing to do")
    return added


def main():
    from .database import SessionLocal, engine

    create_schema(engine)
    db = SessionLocal()
    try:
        seed_dentists(db)
    finally:
        db.close()


# ======================================================
# ENTRYPOINT
# ======================================================

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
