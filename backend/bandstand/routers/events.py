"""Event booking routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.models.event import Event
from bandstand.schemas.event import BookedUsersOut, EventEnvelope, EventListOut, RSVPRequest
from bandstand.services import event_service
from bandstand.services.blob_store import BlobStore, get_blob_store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/addevent", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
def add_event(
    name: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    host: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
    slots: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Create an event from a multipart form with an optional image."""
    fields = {
        "name": name,
        "genre": genre,
        "host": host,
        "date": date,
        "description": description,
        "location": location,
        "user_id": user_id,
        "slots": slots,
        "link": link,
    }
    event = event_service.create_event(db, fields, upload=image, blobs=blobs)
    return EventEnvelope(event=event)


@router.get("/eventsdata", response_model=EventListOut)
def list_events(db: Session = Depends(get_db)):
    """List all events, soonest first."""
    return EventListOut(events=db.query(Event).order_by(Event.date).all())


@router.get("/eventsdata/{event_id}", response_model=EventEnvelope)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return EventEnvelope(event=event_service.get_event(db, event_id))


@router.post("/eventsdata/{event_id}/rsvp", response_model=EventEnvelope)
def rsvp(event_id: str, payload: RSVPRequest, db: Session = Depends(get_db)):
    """Book a seat for ``payload.user_id``; booking twice is rejected."""
    event = event_service.rsvp(db, event_id, payload.user_id)
    return EventEnvelope(message="RSVP successful", event=event)


@router.get("/event/{event_id}/booked-users", response_model=BookedUsersOut)
def list_booked_users(event_id: str, db: Session = Depends(get_db)):
    return BookedUsersOut(booked_users=event_service.booked_users(db, event_id))
