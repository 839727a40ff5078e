from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devevent.database.db import get_db
from devevent.schemas.bookings import BookingOut, BookRequest
from devevent.services.bookings import create_booking

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingOut, status_code=201)
def book_event(payload: BookRequest, db: Session = Depends(get_db)):
    return create_booking(db, event_id=payload.event_id, email=payload.email)
