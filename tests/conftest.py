"""pytest fixtures shared by the API tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project root is available on sys.path so tests can import the tutalink package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tutalink import create_app  # noqa: E402
from tutalink.auth import hash_password  # noqa: E402
from tutalink.config import TestingConfig  # noqa: E402
from tutalink.domain import Role, User  # noqa: E402
from tutalink.storage import STORAGE_EXTENSION_KEY  # noqa: E402

PASSWORD = "testpassword123"
ADMIN_PASSWORD = "adminpassword"


class _Config(TestingConfig):
    ADMIN_PASSWORD = ADMIN_PASSWORD


@pytest.fixture
def app():
    # No app context is held open here: Flask-Login caches the caller on `g`,
    # which must not be shared between test requests.
    return create_app(_Config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions[STORAGE_EXTENSION_KEY]


@pytest.fixture
def make_user(storage):
    """Factory adding a user with the shared test password."""

    def _make_user(username: str, role: Role = Role.LEARNER, **fields) -> User:
        fields.setdefault("email", f"{username}@test.com")
        fields.setdefault("full_name", username.title())
        return storage.add_user(
            User(username=username, password=hash_password(PASSWORD), role=role, **fields)
        )

    return _make_user


@pytest.fixture
def login(app):
    """Return a fresh test client logged in as ``username``."""

    def _login(username: str, password: str = PASSWORD):
        logged_in = app.test_client()
        response = logged_in.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.get_json()
        return logged_in

    return _login


@pytest.fixture
def learner(make_user):
    return make_user("lena", Role.LEARNER)


@pytest.fixture
def tutor(make_user):
    return make_user("tom", Role.TUTOR, department="Mathematics")


@pytest.fixture
def admin_client(login):
    return login("admin", ADMIN_PASSWORD)
