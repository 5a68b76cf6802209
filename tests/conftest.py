"""Pytest configuration and fixtures."""

import io

import pytest

from api import create_app
from models import storage
from models.user import User
from models.video import Video


@pytest.fixture
def app(tmp_path):
    """A fresh app bound to its own SQLite file and upload folder."""
    app = create_app(
        "testing",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_FOLDER=str(tmp_path / "uploads"),
        DB_ECHO=False,
    )
    yield app
    storage.close()


@pytest.fixture
def client(app):
    # Cookies are sent explicitly where a test needs them
    return app.test_client(use_cookies=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def register(client, username="amy", email="a@x.com", password="p1", full_name="Amy X",
             avatar=True, cover=False):
    data = {"username": username, "email": email, "password": password, "fullName": full_name}
    if avatar:
        data["avatar"] = (io.BytesIO(b"fake-png"), "avatar.png")
    if cover:
        data["coverImage"] = (io.BytesIO(b"fake-jpg"), "cover.jpg")
    return client.post("/api/v1/users/register", data=data, content_type="multipart/form-data")


def login(client, password="p1", **identifier):
    if not identifier:
        identifier = {"username": "amy"}
    return client.post("/api/v1/users/login", json={**identifier, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_session(client):
    """Register and log in 'amy'; returns (user_id, access_token, refresh_token)."""
    res = register(client)
    assert res.status_code == 201, res.get_json()
    res = login(client)
    assert res.status_code == 200, res.get_json()
    body = res.get_json()["data"]
    return body["user"]["id"], body["accessToken"], body["refreshToken"]


@pytest.fixture
def other_session(client):
    """A second logged-in user, 'bob'."""
    res = register(client, username="bob", email="b@x.com", password="p2", full_name="Bob Y")
    assert res.status_code == 201, res.get_json()
    body = login(client, password="p2", username="bob").get_json()["data"]
    return body["user"]["id"], body["accessToken"], body["refreshToken"]


@pytest.fixture
def make_video(app):
    """Insert a video owned by `owner_id` directly through storage."""
    def _make(owner_id, title="Intro", views=0):
        with app.app_context():
            video = Video(
                title=title, video_file="/media/intro.mp4", duration=12.5, views=views, owner_id=owner_id
            )
            storage.new(video)
            storage.save()
            return video.id
    return _make


@pytest.fixture
def fetch_user(app):
    def _fetch(user_id):
        with app.app_context():
            return storage.get(User, user_id)
    return _fetch
