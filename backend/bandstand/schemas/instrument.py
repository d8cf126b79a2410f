"""Pydantic schemas for Instruments."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

from bandstand.models.instrument import InstrumentStatus


class InstrumentOut(BaseModel):
    instrument_id: str
    name: str
    description: Optional[str] = None
    category: str
    amount: Optional[str] = None
    image: Optional[str] = None
    user_id: str
    user_name: str
    address: Optional[str] = None
    contact_number: Optional[str] = None
    status: InstrumentStatus
    rented_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    renter_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InstrumentEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    instrument: InstrumentOut


class InstrumentListOut(BaseModel):
    success: bool = True
    instruments: list[InstrumentOut]


class RentRequest(BaseModel):
    rented_date: Optional[date] = None
    expected_return_date: date
