"""Instrument rental routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.dependencies import get_current_user_id
from bandstand.models.instrument import Instrument
from bandstand.schemas.instrument import InstrumentEnvelope, InstrumentListOut, RentRequest
from bandstand.services import instrument_service
from bandstand.services.blob_store import BlobStore, get_blob_store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/addnewinstrument", response_model=InstrumentEnvelope, status_code=status.HTTP_201_CREATED)
def add_instrument(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    contact_number: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """List an instrument for rent; the owner's name is copied from their profile."""
    fields = {
        "name": name,
        "description": description,
        "category": category,
        "amount": amount,
        "user_id": user_id,
        "address": address,
        "contact_number": contact_number,
    }
    instrument = instrument_service.create_instrument(db, fields, upload=image, blobs=blobs)
    return InstrumentEnvelope(message="Instrument added successfully!", instrument=instrument)


@router.get("/instruments", response_model=InstrumentListOut)
def list_instruments(db: Session = Depends(get_db)):
    return InstrumentListOut(instruments=db.query(Instrument).order_by(Instrument.created_at).all())


@router.get("/instruments/{instrument_id}", response_model=InstrumentEnvelope)
def get_instrument(instrument_id: str, db: Session = Depends(get_db)):
    return InstrumentEnvelope(instrument=instrument_service.get_instrument(db, instrument_id))


@router.put("/instruments/rent/{instrument_id}", response_model=InstrumentEnvelope)
def rent_instrument(
    instrument_id: str,
    payload: RentRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    instrument = instrument_service.rent_instrument(
        db,
        instrument_id=instrument_id,
        renter_id=user_id,
        expected_return_date=payload.expected_return_date,
        rented_date=payload.rented_date,
    )
    return InstrumentEnvelope(message="Instrument rented successfully!", instrument=instrument)


@router.put("/instruments/return/{instrument_id}", response_model=InstrumentEnvelope)
def return_instrument(
    instrument_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Hand a rented instrument back; only the current renter may do this."""
    instrument = instrument_service.return_instrument(db, instrument_id, user_id)
    return InstrumentEnvelope(message="Instrument returned and status updated to available!", instrument=instrument)
