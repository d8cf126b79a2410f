"""Event and EventBooking ORM models."""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from bandstand.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    genre = Column(String(100), nullable=False)
    host = Column(String(255), nullable=False)
    image = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    location = Column(String(500), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    slots = Column(Integer, nullable=False)
    link = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship(
        "EventBooking",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventBooking.booked_at",
    )

    @property
    def booked_user_ids(self) -> list[str]:
        return [b.user_id for b in self.bookings]


class EventBooking(Base):
    """One attendee reference; the composite key keeps each user in the set once."""

    __tablename__ = "event_bookings"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    booked_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="bookings")
    user = relationship("User")
