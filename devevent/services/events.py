import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devevent.core.exceptions import DuplicateKey
from devevent.models.bookings import Booking
from devevent.models.events import LIST_FIELDS, TEXT_FIELDS, Event
from devevent.schemas.events import EventOut
from devevent.services import cache
from devevent.services.bookings import count_bookings
from devevent.services.storage import save

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = TEXT_FIELDS + LIST_FIELDS


def _duplicate_slug() -> DuplicateKey:
    return DuplicateKey("slug", "An event with this title already exists")


def create_event(db: Session, data: dict) -> Event:
    event = Event(**{field: data.get(field) for field in EDITABLE_FIELDS})
    db.add(event)
    save(db, event, duplicate=_duplicate_slug())
    cache.invalidate(cache.EVENT_LIST_KEY)
    logger.info("Created event %s (%s)", event.id, event.slug)
    return event


def get_event(db: Session, event_id: int) -> Event | None:
    return db.get(Event, event_id)


def get_event_by_slug(db: Session, slug: str) -> Event | None:
    return db.scalar(select(Event).where(Event.slug == slug))


def list_events(db: Session) -> list[Event]:
    """Return all events, newest first."""
    return list(db.scalars(select(Event).order_by(Event.created_at.desc(), Event.id.desc())))


def update_event(db: Session, slug: str, changes: dict) -> Event | None:
    """
    Apply ``changes`` to the event stored under ``slug``.

    Only the normalization tied to a changed field runs again, so editing the
    overview keeps the slug while editing the title derives a new one.
    """
    event = get_event_by_slug(db, slug)
    if event is None:
        return None

    for field, value in changes.items():
        if field in EDITABLE_FIELDS:
            setattr(event, field, value)

    save(db, event, duplicate=_duplicate_slug())
    cache.invalidate(cache.EVENT_LIST_KEY, cache.event_key(slug), cache.event_key(event.slug))
    logger.info("Updated event %s (%s)", event.id, event.slug)
    return event


def delete_event(db: Session, slug: str) -> bool:
    """Remove an event and its bookings. Returns False if there was no such event."""
    event = get_event_by_slug(db, slug)
    if event is None:
        return False

    event_id = event.id
    try:
        db.execute(
            delete(Booking).where(Booking.event_id == event_id).execution_options(synchronize_session=False)
        )
        db.delete(event)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    cache.invalidate(cache.EVENT_LIST_KEY, cache.event_key(slug))
    logger.info("Deleted event %s (%s)", event_id, slug)
    return True


def get_similar_events(db: Session, slug: str, limit: int | None = None) -> list[Event] | None:
    """Return other events sharing at least one tag, newest first."""
    event = get_event_by_slug(db, slug)
    if event is None:
        return None

    tags = set(event.tags)
    candidates = db.scalars(
        select(Event).where(Event.id != event.id).order_by(Event.created_at.desc(), Event.id.desc())
    )
    similar = [candidate for candidate in candidates if tags.intersection(candidate.tags)]
    return similar[:limit] if limit is not None else similar


def get_event_stats(db: Session, slug: str) -> dict:
    event = get_event_by_slug(db, slug)
    if not event:
        return {}

    booking_count = count_bookings(db, event.id)

    return {
        "event_id": event.id,
        "slug": event.slug,
        "booking_count": booking_count,
    }


def get_event_listing(db: Session) -> list[dict]:
    """Serialized event list, served from the cache when present."""
    cached = cache.get_cached(cache.EVENT_LIST_KEY)
    if cached is not None:
        return cached

    listing = [EventOut.model_validate(event).model_dump(mode="json") for event in list_events(db)]
    cache.set_cached(cache.EVENT_LIST_KEY, listing)
    return listing


def get_event_payload(db: Session, slug: str) -> dict | None:
    """Serialized single event, served from the cache when present."""
    key = cache.event_key(slug)
    cached = cache.get_cached(key)
    if cached is not None:
        return cached

    event = get_event_by_slug(db, slug)
    if event is None:
        return None

    payload = EventOut.model_validate(event).model_dump(mode="json")
    cache.set_cached(key, payload)
    return payload
