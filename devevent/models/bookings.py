from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, event, func, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, Session, mapped_column

from devevent.core.exceptions import (
    InvalidFormat,
    MissingRequiredField,
    ReferenceLookupFailed,
    ReferenceNotFound,
)
from devevent.database.db import Base
from devevent.models.events import Event
from devevent.models.normalize import normalize_email


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Checked against events when written; no foreign key.
    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (UniqueConstraint("event_id", "email", name="uniq_event_email"),)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id})>"


def validate_booking(session: Session, record: Booking) -> None:
    """Normalize the email and make sure the booked event exists."""
    state = inspect(record)

    if record.email is None:
        raise MissingRequiredField("email", "Email is required")
    if not isinstance(record.email, str):
        raise InvalidFormat("email", "Please provide a valid email address")
    if not record.email.strip():
        raise MissingRequiredField("email", "Email is required")
    if state.attrs.email.history.has_changes():
        record.email = normalize_email(record.email)

    if record.event_id is None:
        raise MissingRequiredField("event_id", "Event ID is required")
    if state.attrs.event_id.history.has_changes():
        try:
            found = session.get(Event, record.event_id)
        except SQLAlchemyError as exc:
            raise ReferenceLookupFailed("event_id", "Error validating event reference") from exc
        if found is None:
            raise ReferenceNotFound("event_id", "Referenced event does not exist")


@event.listens_for(Session, "before_flush")
def _validate_bookings(session, flush_context, instances):
    for record in list(session.new):
        if isinstance(record, Booking):
            validate_booking(session, record)
    for record in list(session.dirty):
        if isinstance(record, Booking) and session.is_modified(record):
            validate_booking(session, record)
