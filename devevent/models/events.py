from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text, event, func, inspect
from sqlalchemy.orm import Mapped, Session, mapped_column

from devevent.core.exceptions import EmptyCollection, InvalidFormat, MissingRequiredField
from devevent.database.db import Base
from devevent.models.normalize import normalize_date, normalize_time, slugify

TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
LIST_FIELDS = ("agenda", "tags")


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    overview: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False)
    venue: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    mode: Mapped[str] = mapped_column(String(50), nullable=False)
    audience: Mapped[str] = mapped_column(String(200), nullable=False)
    agenda: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    organizer: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("uniq_event_slug", "slug", unique=True),)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug})>"


def _changed(record: Event, field: str) -> bool:
    return inspect(record).attrs[field].history.has_changes()


def _label(field: str) -> str:
    return field.capitalize()


def validate_event(record: Event) -> None:
    """
    Check required fields and recompute the derived ones.

    Slug, date and time are only recomputed when their source field is new
    or has changed since the record was loaded.
    """
    for field in TEXT_FIELDS:
        value = getattr(record, field)
        if value is None:
            raise MissingRequiredField(field, f"{_label(field)} is required")
        if not isinstance(value, str):
            raise InvalidFormat(field, f"{_label(field)} must be text")
        if value != value.strip():
            setattr(record, field, value.strip())
        if not value.strip():
            raise MissingRequiredField(field, f"{_label(field)} is required")

    for field in LIST_FIELDS:
        items = getattr(record, field)
        if items is None:
            raise MissingRequiredField(field, f"{_label(field)} is required")
        if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
            raise InvalidFormat(field, f"{_label(field)} must be a list of text items")
        if not items:
            raise EmptyCollection(field, f"{_label(field)} must have at least one item")

    if _changed(record, "title"):
        slug = slugify(record.title)
        if not slug:
            raise InvalidFormat("title", "Title must contain at least one letter or digit")
        record.slug = slug

    if _changed(record, "date"):
        record.date = normalize_date(record.date)

    if _changed(record, "time"):
        record.time = normalize_time(record.time)


@event.listens_for(Session, "before_flush")
def _validate_events(session, flush_context, instances):
    for record in list(session.new):
        if isinstance(record, Event):
            validate_event(record)
    for record in list(session.dirty):
        if isinstance(record, Event) and session.is_modified(record):
            validate_event(record)
