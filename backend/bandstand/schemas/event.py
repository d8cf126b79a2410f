"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from bandstand.schemas.user import BookedUserOut


class EventOut(BaseModel):
    event_id: str
    name: str
    genre: str
    host: str
    image: Optional[str] = None
    description: str
    location: str
    date: datetime
    user_id: str
    slots: int
    link: str
    booked_user_ids: list[str] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    event: EventOut


class EventListOut(BaseModel):
    success: bool = True
    events: list[EventOut]


class RSVPRequest(BaseModel):
    user_id: str


class BookedUsersOut(BaseModel):
    success: bool = True
    booked_users: list[BookedUserOut]
