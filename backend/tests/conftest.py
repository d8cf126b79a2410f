"""Pytest fixtures: in-memory SQLite database for fast, isolated tests."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Query, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from bandstand.database import Base, get_db
from bandstand.main import app
from bandstand.services.blob_store import BlobStore, get_blob_store
from bandstand.services.feed_broadcaster import FeedBroadcaster

# Import all models so they register with Base.metadata
from bandstand.models.user import User                    # noqa: F401
from bandstand.models.event import Event, EventBooking    # noqa: F401
from bandstand.models.post import Post, PostLike          # noqa: F401
from bandstand.models.instrument import Instrument        # noqa: F401

SQLITE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory SQLite engine for each test."""
    engine = create_engine(
        SQLITE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture(scope="function")
def client(db_engine, upload_dir):
    """FastAPI TestClient with the database and blob store overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    blobs = BlobStore(upload_dir, max_bytes=1024)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    app.state.broadcaster = FeedBroadcaster()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def miss_email_precheck(monkeypatch):
    """Return a switch that makes email-filtered lookups find nothing, as when two requests race."""
    real_first = Query.first

    def first(self):
        if "email" in str(self.statement.whereclause):
            return None
        return real_first(self)

    def activate():
        monkeypatch.setattr(Query, "first", first)

    return activate


# ---------------------------------------------------------------------------
# Helpers: register / log in users through the API
# ---------------------------------------------------------------------------
def register_user(client: TestClient, email: str = "a@x.com", password: str = "secret",
                  first_name: str = "Test", last_name: str = "User", role: str = "Musician",
                  description: str = "") -> dict:
    """Helper: POST /register and return the payload that was sent."""
    payload = {
        "role": role,
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "password": password,
        "phone": "555-0100",
        "address": "1 Main St",
        "country": "US",
        "state": "CA",
        "description": description,
    }
    resp = client.post("/register", json=payload)
    assert resp.status_code == 201, resp.text
    return payload


def login(client: TestClient, email: str, password: str = "secret") -> str:
    """Helper: POST /login and return the bearer token."""
    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_logged_in_user(client: TestClient, email: str = "a@x.com", **kwargs) -> dict:
    """Helper: register + login; returns {"user": profile, "token": token, "headers": ...}."""
    register_user(client, email=email, **kwargs)
    token = login(client, email, kwargs.get("password", "secret"))
    resp = client.get("/user", headers=auth_header(token))
    assert resp.status_code == 200, resp.text
    return {"user": resp.json()["user"], "token": token, "headers": auth_header(token)}


def create_test_event(client: TestClient, owner_id: str, name: str = "Jazz Night",
                      slots: int = 5, files: dict = None):
    """Helper: POST /addevent as multipart and return the response."""
    data = {
        "name": name,
        "genre": "Jazz",
        "host": "The Blue Room",
        "date": "2026-12-01T19:30:00",
        "description": "An evening of standards",
        "location": "Downtown",
        "user_id": owner_id,
        "slots": str(slots),
        "link": "https://example.com/jazz",
    }
    return client.post("/addevent", data=data, files=files)


def create_test_instrument(client: TestClient, owner_id: str, name: str = "Fender Stratocaster") -> dict:
    """Helper: POST /addnewinstrument and return the created instrument."""
    resp = client.post("/addnewinstrument", data={
        "name": name,
        "description": "Sunburst, 2015",
        "category": "Guitar",
        "amount": "25/day",
        "user_id": owner_id,
        "address": "1 Main St",
        "contact_number": "555-0100",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["instrument"]
