"""
Test event and booking service functions.
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devevent.core.exceptions import DuplicateKey, InvalidFormat, MissingRequiredField, ReferenceNotFound
from devevent.models.bookings import Booking
from devevent.models.events import Event
from devevent.services.bookings import count_bookings, create_booking, get_booking
from devevent.services.events import (
    create_event,
    delete_event,
    get_event,
    get_event_by_slug,
    get_event_stats,
    get_similar_events,
    list_events,
    update_event,
)


class TestEventService:
    """Test event service functions."""

    def test_create_event(self, db_session: Session, event_data):
        event = create_event(db_session, event_data(date="Nov 5, 2025", time="9:30"))

        assert event.id is not None
        assert event.slug == "pycon-nairobi-2025"
        assert event.date == "2025-11-05"
        assert event.time == "09:30"

    def test_create_event_ignores_unknown_fields(self, db_session: Session, event_data):
        event = create_event(db_session, event_data(slug="chosen-by-caller", id=42))

        assert event.slug == "pycon-nairobi-2025"
        assert event.id != 42

    def test_create_event_duplicate_slug(self, db_session: Session, event_data):
        """Test that a second event deriving the same slug is rejected."""
        first = create_event(db_session, event_data(title="Python Meetup"))

        with pytest.raises(DuplicateKey) as exc_info:
            create_event(db_session, event_data(title="  python   meetup! "))

        assert exc_info.value.field == "slug"
        assert [event.id for event in list_events(db_session)] == [first.id]

    def test_create_event_invalid_leaves_nothing(self, db_session: Session, event_data):
        with pytest.raises(MissingRequiredField):
            create_event(db_session, event_data(mode=""))

        assert list_events(db_session) == []

    def test_lookups(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())

        assert get_event(db_session, event.id).slug == event.slug
        assert get_event_by_slug(db_session, "pycon-nairobi-2025").id == event.id
        assert get_event(db_session, 99999) is None
        assert get_event_by_slug(db_session, "missing") is None

    def test_list_events_newest_first(self, db_session: Session, event_data):
        first = create_event(db_session, event_data(title="First"))
        second = create_event(db_session, event_data(title="Second"))

        assert [event.id for event in list_events(db_session)] == [second.id, first.id]

    def test_update_event_title(self, db_session: Session, event_data):
        create_event(db_session, event_data())

        event = update_event(db_session, "pycon-nairobi-2025", {"title": "PyCon Kenya"})

        assert event.slug == "pycon-kenya"
        assert get_event_by_slug(db_session, "pycon-nairobi-2025") is None

    def test_update_event_keeps_slug(self, db_session: Session, event_data):
        create_event(db_session, event_data())

        event = update_event(db_session, "pycon-nairobi-2025", {"date": "December 1, 2025", "slug": "ignored"})

        assert event.slug == "pycon-nairobi-2025"
        assert event.date == "2025-12-01"

    def test_update_event_missing(self, db_session: Session):
        assert update_event(db_session, "missing", {"title": "Anything"}) is None

    def test_update_event_invalid_keeps_stored_values(self, db_session: Session, event_data):
        create_event(db_session, event_data())

        with pytest.raises(InvalidFormat):
            update_event(db_session, "pycon-nairobi-2025", {"time": "25:00"})

        assert get_event_by_slug(db_session, "pycon-nairobi-2025").time == "09:00"

    def test_update_event_into_existing_slug(self, db_session: Session, event_data):
        create_event(db_session, event_data(title="Alpha"))
        create_event(db_session, event_data(title="Beta"))

        with pytest.raises(DuplicateKey):
            update_event(db_session, "beta", {"title": "ALPHA"})

        assert get_event_by_slug(db_session, "beta").title == "Beta"

    def test_delete_event_removes_bookings(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())
        event_id = event.id
        create_booking(db_session, event_id=event_id, email="ada@example.com")

        assert delete_event(db_session, "pycon-nairobi-2025") is True

        assert get_event(db_session, event_id) is None
        assert db_session.query(Booking).count() == 0
        assert delete_event(db_session, "pycon-nairobi-2025") is False

    def test_delete_event_failure_rolls_back(
        self, db_session: Session, event_data, monkeypatch: pytest.MonkeyPatch
    ):
        event = create_event(db_session, event_data())
        event_id = event.id
        create_booking(db_session, event_id=event_id, email="ada@example.com")

        def failing_commit():
            raise SQLAlchemyError("database is locked")

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with pytest.raises(SQLAlchemyError):
            delete_event(db_session, "pycon-nairobi-2025")
        monkeypatch.undo()

        assert get_event(db_session, event_id) is not None
        assert db_session.query(Booking).count() == 1
        assert delete_event(db_session, "pycon-nairobi-2025") is True

    def test_get_similar_events(self, db_session: Session, event_data):
        create_event(db_session, event_data(title="Python Day", tags=["python", "community"]))
        meetup = create_event(db_session, event_data(title="Python Meetup", tags=["python"]))
        create_event(db_session, event_data(title="Rust Night", tags=["rust"]))
        summit = create_event(db_session, event_data(title="Community Summit", tags=["community"]))

        similar = get_similar_events(db_session, "python-day")

        assert [event.id for event in similar] == [summit.id, meetup.id]
        assert [event.id for event in get_similar_events(db_session, "python-day", limit=1)] == [summit.id]
        assert get_similar_events(db_session, "rust-night") == []
        assert get_similar_events(db_session, "missing") is None

    def test_get_event_stats(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())
        for email in ("ada@example.com", "grace@example.com"):
            create_booking(db_session, event_id=event.id, email=email)

        stats = get_event_stats(db_session, "pycon-nairobi-2025")

        assert stats == {"event_id": event.id, "slug": "pycon-nairobi-2025", "booking_count": 2}

    def test_get_event_stats_nonexistent(self, db_session: Session):
        assert get_event_stats(db_session, "missing") == {}


class TestBookingService:
    """Test booking service functions."""

    def test_create_booking_success(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())

        booking = create_booking(db_session, event_id=event.id, email=" Ada@Example.com ")

        assert booking.id is not None
        assert booking.event_id == event.id
        assert booking.email == "ada@example.com"

    def test_create_booking_nonexistent_event(self, db_session: Session):
        with pytest.raises(ReferenceNotFound) as exc_info:
            create_booking(db_session, event_id=99999, email="ada@example.com")

        assert exc_info.value.field == "event_id"
        assert db_session.query(Booking).count() == 0

    def test_create_booking_duplicate_email(self, db_session: Session, event_data):
        """Test that the same email in different casing cannot book twice."""
        event = create_event(db_session, event_data())
        create_booking(db_session, event_id=event.id, email="ada@example.com")

        with pytest.raises(DuplicateKey, match="already booked"):
            create_booking(db_session, event_id=event.id, email="ADA@EXAMPLE.COM")

        assert count_bookings(db_session, event.id) == 1

    def test_session_usable_after_rejection(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())

        with pytest.raises(InvalidFormat):
            create_booking(db_session, event_id=event.id, email="nope")

        booking = create_booking(db_session, event_id=event.id, email="grace@example.com")
        assert booking.id is not None

    def test_get_booking_by_compound_key(self, db_session: Session, event_data):
        event = create_event(db_session, event_data())
        booking = create_booking(db_session, event_id=event.id, email="ada@example.com")

        found = get_booking(db_session, event_id=event.id, email="  ADA@example.com")

        assert found is not None
        assert found.id == booking.id
        assert get_booking(db_session, event_id=event.id, email="grace@example.com") is None

    def test_count_bookings(self, db_session: Session, event_data):
        first = create_event(db_session, event_data(title="First"))
        second = create_event(db_session, event_data(title="Second"))
        for i in range(3):
            create_booking(db_session, event_id=first.id, email=f"user{i}@example.com")
        create_booking(db_session, event_id=second.id, email="user0@example.com")

        assert count_bookings(db_session, first.id) == 3
        assert count_bookings(db_session, second.id) == 1
        assert count_bookings(db_session, 99999) == 0
        assert db_session.query(Event).count() == 2
