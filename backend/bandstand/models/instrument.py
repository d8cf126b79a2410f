"""Instrument ORM model."""
import enum
import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from bandstand.database import Base


class InstrumentStatus(str, enum.Enum):
    available = "available"
    not_available = "not available"


class Instrument(Base):
    __tablename__ = "instruments"

    instrument_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    amount = Column(String(50), nullable=True)
    image = Column(String(255), nullable=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    user_name = Column(String(201), nullable=False)  # denormalized owner name
    address = Column(String(500), nullable=True)
    contact_number = Column(String(50), nullable=True)
    # not_available <=> rented_date, expected_return_date and renter_id are all set
    status = Column(SAEnum(InstrumentStatus), nullable=False, default=InstrumentStatus.available)
    rented_date = Column(Date, nullable=True)
    expected_return_date = Column(Date, nullable=True)
    renter_id = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
