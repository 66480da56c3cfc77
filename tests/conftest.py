"""
Shared fixtures for the API and service tests.

The database and storage directory are redirected to a throwaway temp
directory through environment variables *before* the application modules
are imported, since those modules read their configuration at import time.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="mediasignage-tests-")
os.environ["SIGNAGE_DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SIGNAGE_STORAGE_DIR"] = os.path.join(_TMP_DIR, "storage")
os.environ["SIGNAGE_BCRYPT_ROUNDS"] = "4"
os.environ["SIGNAGE_JWT_SECRET"] = "test-secret-key-with-enough-length-for-hs256"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mediasignage.db import Base, SessionLocal, engine  # noqa: E402
from mediasignage.main import app  # noqa: E402
from mediasignage.models.content import Content  # noqa: E402
from mediasignage.models.playlist import Playlist  # noqa: E402
from mediasignage.models.user import User  # noqa: E402
from mediasignage.services.auth import OwnerContext  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _register(client, email, password="secret123", name=None):
    resp = client.post(
        "/auth/register",
        json={"email": email, "password": password, "name": name or email.split("@")[0]},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    """Bearer headers for the primary test owner."""
    return _register(client, "owner@example.com")


@pytest.fixture
def other_headers(client):
    """Bearer headers for a second, unrelated owner."""
    return _register(client, "intruder@example.com")


@pytest.fixture
def upload(client):
    """Upload a small file as content; returns the response."""

    def _upload(headers, filename="clip.mp4", data=b"\x00\x01fake-bytes", **fields):
        form = {"name": fields.pop("name", os.path.splitext(filename)[0])}
        form.update({key: value for key, value in fields.items() if value is not None})
        return client.post(
            "/content",
            files={"file": (filename, data, "application/octet-stream")},
            data=form,
            headers=headers,
        )

    return _upload


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_owner(db_session):
    """Create a bare account row and return its OwnerContext."""

    def _make(email):
        user = User(email=email, password_hash="unused")
        db_session.add(user)
        db_session.commit()
        return OwnerContext(user_id=user.id)

    return _make


@pytest.fixture
def make_content(db_session):
    def _make(owner, name, duration=None, size=100, type="image"):
        content = Content(
            user_id=owner.user_id,
            name=name,
            type=type,
            file_path=f"storage/media/{name}.bin",
            file_size=size,
            duration=duration,
        )
        db_session.add(content)
        db_session.commit()
        return content.id

    return _make


@pytest.fixture
def make_playlist(db_session):
    def _make(owner, name="Playlist"):
        playlist = Playlist(user_id=owner.user_id, name=name)
        db_session.add(playlist)
        db_session.commit()
        return playlist.id

    return _make
