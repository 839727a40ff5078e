from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from devevent.components.event_card import TEMPLATES_DIR, card_fields, render_event_card
from devevent.core.exceptions import RecordValidationError
from devevent.database.db import get_db
from devevent.schemas.events import EventOut
from devevent.services.bookings import count_bookings, create_booking
from devevent.services.events import get_event_listing, get_event_payload, get_similar_events

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

SIMILAR_EVENTS_LIMIT = 3


def _render_cards(events: list[dict]) -> list:
    return [render_event_card(**card_fields(event)) for event in events]


def _render_event_page(request: Request, db: Session, event: dict, **context):
    similar = get_similar_events(db, event["slug"], limit=SIMILAR_EVENTS_LIMIT) or []
    similar_cards = _render_cards([EventOut.model_validate(e).model_dump(mode="json") for e in similar])
    return templates.TemplateResponse(
        request,
        "event_detail.html",
        {
            "event": event,
            "booking_count": count_bookings(db, event["id"]),
            "similar_cards": similar_cards,
            **context,
        },
    )


@router.get("/", response_class=HTMLResponse)
def index(request: Request, db: Session = Depends(get_db)):
    cards = _render_cards(get_event_listing(db))
    return templates.TemplateResponse(request, "index.html", {"cards": cards})


@router.get("/events/{slug}", response_class=HTMLResponse)
def event_page(slug: str, request: Request, db: Session = Depends(get_db)):
    event = get_event_payload(db, slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _render_event_page(request, db, event)


@router.post("/events/{slug}/book", response_class=HTMLResponse)
def book_from_page(slug: str, request: Request, email: str = Form(""), db: Session = Depends(get_db)):
    event = get_event_payload(db, slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        create_booking(db, event_id=event["id"], email=email)
    except RecordValidationError as exc:
        if exc.status_code >= 500:
            raise
        return _render_event_page(request, db, event, error=exc.message, email=email)

    return _render_event_page(request, db, event, success="Thank you for signing up!")
