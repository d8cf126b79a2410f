"""Instrument rental service: listing, rent and return transitions."""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bandstand.exceptions import (
    BadRequestException,
    NotAvailableException,
    NotFoundException,
    NotRenterException,
    SelfRentalForbiddenException,
)
from bandstand.models.instrument import Instrument, InstrumentStatus
from bandstand.models.user import User
from bandstand.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "category", "user_id")


def get_instrument(db: Session, instrument_id: str) -> Instrument:
    instrument = db.query(Instrument).filter(Instrument.instrument_id == instrument_id).first()
    if not instrument:
        raise NotFoundException("Instrument", instrument_id)
    return instrument


def check_required_fields(fields: dict) -> None:
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise BadRequestException("Missing required fields", {"missing": missing})


def create_instrument(db: Session, fields: dict, upload=None, blobs: Optional[BlobStore] = None) -> Instrument:
    """List a new instrument; it always starts out available."""
    check_required_fields(fields)

    owner = db.query(User).filter(User.user_id == fields["user_id"]).first()
    if not owner:
        raise BadRequestException("Instrument owner does not exist")

    image = blobs.save_image(upload) if blobs else None
    instrument = Instrument(
        name=fields["name"],
        description=fields.get("description"),
        category=fields["category"],
        amount=fields.get("amount"),
        image=image,
        user_id=owner.user_id,
        user_name=owner.full_name,
        address=fields.get("address"),
        contact_number=fields.get("contact_number"),
        status=InstrumentStatus.available,
    )
    db.add(instrument)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        if blobs:
            blobs.delete(image)
        raise
    db.refresh(instrument)
    logger.info("Listed instrument '%s' (%s) for owner %s", instrument.name, instrument.instrument_id, owner.user_id)
    return instrument


def rent_instrument(
    db: Session,
    instrument_id: str,
    renter_id: str,
    expected_return_date: date,
    rented_date: Optional[date] = None,
) -> Instrument:
    instrument = get_instrument(db, instrument_id)

    if instrument.user_id == renter_id:
        raise SelfRentalForbiddenException("You cannot rent your own instrument.")
    if instrument.status != InstrumentStatus.available:
        raise NotAvailableException("Instrument is not available for rent.")

    rented_date = rented_date or date.today()
    if expected_return_date < rented_date:
        raise BadRequestException("Expected return date must not precede the rental date")

    instrument.status = InstrumentStatus.not_available
    instrument.rented_date = rented_date
    instrument.expected_return_date = expected_return_date
    instrument.renter_id = renter_id
    db.commit()
    db.refresh(instrument)
    logger.info("User %s rented instrument %s until %s", renter_id, instrument_id, expected_return_date)
    return instrument


def return_instrument(db: Session, instrument_id: str, user_id: str) -> Instrument:
    instrument = get_instrument(db, instrument_id)

    if instrument.renter_id is None or instrument.renter_id != user_id:
        raise NotRenterException("You are not the renter of this instrument.")

    instrument.status = InstrumentStatus.available
    instrument.rented_date = None
    instrument.expected_return_date = None
    instrument.renter_id = None
    db.commit()
    db.refresh(instrument)
    logger.info("User %s returned instrument %s", user_id, instrument_id)
    return instrument
