from datetime import datetime

from pydantic import BaseModel, Field


# ---------- Event ----------
class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    overview: str = Field(min_length=1)
    image: str = Field(min_length=1, max_length=500)
    venue: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    date: str = Field(min_length=1, max_length=64)
    time: str = Field(min_length=1, max_length=32)
    mode: str = Field(min_length=1, max_length=50)
    audience: str = Field(min_length=1, max_length=200)
    agenda: list[str] = Field(min_length=1)
    organizer: str = Field(min_length=1)
    tags: list[str] = Field(min_length=1)


class EventUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    overview: str | None = None
    image: str | None = Field(default=None, max_length=500)
    venue: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    date: str | None = Field(default=None, max_length=64)
    time: str | None = Field(default=None, max_length=32)
    mode: str | None = Field(default=None, max_length=50)
    audience: str | None = Field(default=None, max_length=200)
    agenda: list[str] | None = None
    organizer: str | None = None
    tags: list[str] | None = None


class EventOut(BaseModel):
    id: int
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class EventStatsOut(BaseModel):
    event_id: int
    slug: str
    booking_count: int
