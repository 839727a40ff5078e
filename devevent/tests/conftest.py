import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from devevent.database.db import Base, get_db
from devevent.main import app

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_redis():
    """A Redis stand-in with its own empty keyspace."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture(autouse=True)
def redis_client(fake_redis, monkeypatch: pytest.MonkeyPatch):
    """Point the event cache at the fake Redis."""
    monkeypatch.setattr("devevent.services.cache.get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture
def event_data():
    """Build a valid event payload, overriding any fields given."""

    def build(**overrides) -> dict:
        data = {
            "title": "PyCon Nairobi 2025",
            "description": "The annual gathering of the Python community in East Africa.",
            "overview": "Three days of talks, tutorials and sprints.",
            "image": "/images/pycon.png",
            "venue": "KICC",
            "location": "Nairobi, Kenya",
            "date": "2025-11-05",
            "time": "09:00",
            "mode": "offline",
            "audience": "Developers",
            "agenda": ["Registration", "Keynote", "Sprints"],
            "organizer": "Python Software Society of Kenya",
            "tags": ["python", "community"],
        }
        data.update(overrides)
        return data

    return build
