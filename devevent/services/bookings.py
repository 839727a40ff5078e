import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from devevent.core.exceptions import DuplicateKey
from devevent.models.bookings import Booking
from devevent.services.storage import save

logger = logging.getLogger(__name__)


def create_booking(db: Session, *, event_id: int, email: str) -> Booking:
    """
    Book ``email`` onto an event.

    Raises ReferenceNotFound when the event is gone and DuplicateKey when the
    email (compared case-insensitively) already holds a booking for it.
    """
    booking = Booking(event_id=event_id, email=email)
    db.add(booking)
    save(
        db,
        booking,
        duplicate=DuplicateKey("email", "This email has already booked this event"),
    )
    logger.info("Created booking %s for event %s", booking.id, booking.event_id)
    return booking


def get_booking(db: Session, *, event_id: int, email: str) -> Booking | None:
    return db.scalar(
        select(Booking).where(
            Booking.event_id == event_id,
            Booking.email == email.strip().lower(),
        )
    )


def count_bookings(db: Session, event_id: int) -> int:
    count = db.scalar(select(func.count(Booking.id)).where(Booking.event_id == event_id))
    return int(count or 0)
