"""Event booking service: creation, RSVP and attendee lookup."""
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bandstand.exceptions import (
    AlreadyRegisteredException,
    BadRequestException,
    NotFoundException,
)
from bandstand.models.event import Event, EventBooking
from bandstand.models.user import User
from bandstand.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "genre", "host", "date", "description", "location", "user_id", "slots", "link")


def is_valid_id(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first() if is_valid_id(event_id) else None
    if not event:
        raise NotFoundException("Event", event_id)
    return event


def check_required_fields(fields: dict) -> None:
    missing = [name for name in REQUIRED_FIELDS if fields.get(name) in (None, "")]
    if missing:
        raise BadRequestException("Missing required fields", {"missing": missing})


def create_event(db: Session, fields: dict, upload=None, blobs: Optional[BlobStore] = None) -> Event:
    """Create an event once every mandatory field is present and the owner exists.

    The image upload is written only after the form has been validated, and is
    removed again if the insert fails.
    """
    check_required_fields(fields)

    try:
        date = fields["date"] if isinstance(fields["date"], datetime) else datetime.fromisoformat(fields["date"])
        slots = int(fields["slots"])
    except (TypeError, ValueError):
        raise BadRequestException("Invalid date or slots")
    if slots < 1:
        raise BadRequestException("slots must be a positive number")

    owner = db.query(User).filter(User.user_id == fields["user_id"]).first()
    if not owner:
        raise BadRequestException("Event owner does not exist")

    image = blobs.save_image(upload) if blobs else None
    event = Event(
        name=fields["name"],
        genre=fields["genre"],
        host=fields["host"],
        date=date,
        description=fields["description"],
        location=fields["location"],
        user_id=owner.user_id,
        slots=slots,
        link=fields["link"],
        image=image,
    )
    db.add(event)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        if blobs:
            blobs.delete(image)
        raise
    db.refresh(event)
    logger.info("Created event '%s' (%s) by owner %s", event.name, event.event_id, owner.user_id)
    return event


def rsvp(db: Session, event_id: str, user_id: str) -> Event:
    """Append ``user_id`` to the attendee set; a second RSVP is rejected."""
    event = get_event(db, event_id)

    if user_id in event.booked_user_ids:
        raise AlreadyRegisteredException("User already RSVP'd")

    if not db.query(User).filter(User.user_id == user_id).first():
        raise NotFoundException("User", user_id)

    db.add(EventBooking(event_id=event.event_id, user_id=user_id))
    db.commit()
    db.refresh(event)
    logger.info("User %s RSVP'd to event %s", user_id, event_id)
    return event


def booked_users(db: Session, event_id: str) -> list[User]:
    if not is_valid_id(event_id):
        raise BadRequestException("Invalid event ID")
    event = get_event(db, event_id)
    return [booking.user for booking in event.bookings]
