from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from devevent.database.db import get_db
from devevent.schemas.events import EventCreate, EventOut, EventStatsOut, EventUpdate
from devevent.services.events import (
    create_event,
    delete_event,
    get_event_listing,
    get_event_payload,
    get_event_stats,
    get_similar_events,
    update_event,
)

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_all_events(db: Session = Depends(get_db)):
    return get_event_listing(db)


@router.post("", response_model=EventOut, status_code=201)
def add_event(payload: EventCreate, db: Session = Depends(get_db)):
    return create_event(db, payload.model_dump())


@router.get("/{slug}", response_model=EventOut)
def event_detail(slug: str, db: Session = Depends(get_db)):
    event = get_event_payload(db, slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.patch("/{slug}", response_model=EventOut)
def edit_event(slug: str, payload: EventUpdate, db: Session = Depends(get_db)):
    event = update_event(db, slug, payload.model_dump(exclude_unset=True))
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.delete("/{slug}", status_code=204)
def remove_event(slug: str, db: Session = Depends(get_db)):
    if not delete_event(db, slug):
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=204)


@router.get("/{slug}/similar", response_model=list[EventOut])
def similar_events(slug: str, limit: int = Query(3, ge=1, le=20), db: Session = Depends(get_db)):
    events = get_similar_events(db, slug, limit=limit)
    if events is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return events


@router.get("/{slug}/stats", response_model=EventStatsOut)
def event_stats(slug: str, db: Session = Depends(get_db)):
    stats = get_event_stats(db, slug)
    if not stats:
        raise HTTPException(status_code=404, detail="Event not found")
    return stats
