from sqlalchemy import Column, Float, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

# Statuses that occupy a slot
ACTIVE_STATUSES = ("pending", "confirmed")
ACTIVE_SLOT_INDEX = 'uq_appointments_active_slot'

_ACTIVE_SQL = text("status IN ('pending', 'confirmed')")


class Dentists(Base):
    __tablename__ = 'dentists'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    specialty = Column(Text)
    availability_label = Column(Text)
    rating = Column(Float)
    photo_url = Column(Text)
    is_active = Column(Integer, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    appointments = relationship('Appointments', back_populates='dentist')


class Patients(Base):
    __tablename__ = 'patients'

    id = Column(Text, primary_key=True)
    full_name = Column(Text)
    email = Column(Text, unique=True)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    appointments = relationship('Appointments', back_populates='patient')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        # At most one active appointment per dentist and start instant
        Index(
            ACTIVE_SLOT_INDEX,
            'dentist_id', 'start_at',
            unique=True,
            sqlite_where=_ACTIVE_SQL,
            postgresql_where=_ACTIVE_SQL,
        ),
        Index('ix_appointments_patient_start', 'patient_id', 'start_at'),
    )

    id = Column(Integer, primary_key=True)
    patient_id = Column(ForeignKey('patients.id', ondelete='CASCADE'), nullable=False)
    dentist_id = Column(ForeignKey('dentists.id'), nullable=False)
    # Display snapshot only; joins use dentist_id
    dentist_name = Column(Text, nullable=False)
    # Canonical UTC "YYYY-MM-DDTHH:MM:SSZ"; sorts lexicographically
    start_at = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    service_type = Column(Text, nullable=False)
    service_name = Column(Text, nullable=False)
    notes = Column(Text)
    amount_minor = Column(Integer)
    currency = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    dentist = relationship('Dentists', back_populates='appointments')
    patient = relationship('Patients', back_populates='appointments')
