"""Common test fixtures for all test modules"""
import pytest
from fastapi.testclient import TestClient

from core.db import Database
from service.content_service import create_video
from service.dto import IdentityUpsertDTO, VideoCreateDTO
from service.identity_service import upsert_identity


@pytest.fixture
def database():
    """In-memory SQLite store with the full schema"""
    db = Database("sqlite://").connect()
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def make_user(session):
    """Upsert a verified identity and return its UserDTO"""
    def _make(uid: str, email: str = None, **kwargs):
        dto = IdentityUpsertDTO(uid=uid, email=email or f"{uid}@example.com", **kwargs)
        return upsert_identity(dto, session=session, trace_id="test_seed")
    return _make


@pytest.fixture
def make_video(session):
    """Register a video for an existing owner and return its VideoDTO"""
    def _make(owner_id: str, **kwargs):
        kwargs.setdefault("video_url", "https://cdn.example.com/v.mp4")
        return create_video(owner_id, VideoCreateDTO(**kwargs), session=session, trace_id="test_seed")
    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice-0001-uid", display_name="Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob-0002-uid", display_name="Bob")


@pytest.fixture
def client(database):
    """API client bound to the test store"""
    from app.main import create_app

    with TestClient(create_app(database=database)) as c:
        yield c


@pytest.fixture
def auth_headers():
    def _headers(user_id: str):
        return {"Authorization": "Bearer test-token", "X-User-Id": user_id}
    return _headers
