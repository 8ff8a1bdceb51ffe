"""
Pytest configuration and fixtures for the gallery servers.

Paths and the database point at a temporary directory; this has to happen
before anything imports gallery.config.
"""

import os
import shutil
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="gallery-tests-")
os.environ["GALLERY_DATA_DIR"] = os.path.join(_TEST_ROOT, "data")
os.environ["GALLERY_UPLOADS_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TEST_ROOT, "gallery-test.db").replace("\\", "/")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SEED_MASTER_USERNAME"] = "master"
os.environ["SEED_MASTER_PASSWORD"] = "master-pass"
os.environ["LIKE_RATE_LIMIT_MAX"] = "1000"
os.environ["GMAIL_ADDRESS"] = ""
os.environ["GMAIL_APP_PASSWORD"] = ""

import pytest  # noqa: E402

import admin_server  # noqa: E402
import public_server  # noqa: E402
from gallery.config import REPORTS_DIR, UPLOADS_DIR  # noqa: E402
from gallery.extensions import db  # noqa: E402
from gallery.public.routes import reset_rate_limit  # noqa: E402
from gallery.services import admin_service  # noqa: E402
from tests.helpers import ADMIN, MASTER, jpeg_bytes, login, upload  # noqa: E402


def _empty_dir(path):
    for entry in path.iterdir():
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh tables, an empty uploads dir and a reset rate limiter for every test."""
    admin_server.app.config["TESTING"] = True
    public_server.app.config["TESTING"] = True
    with admin_server.app.app_context():
        db.drop_all()
        db.create_all()
        admin_service.seed_master_admin()
    _empty_dir(UPLOADS_DIR)
    _empty_dir(REPORTS_DIR)
    reset_rate_limit()
    yield


@pytest.fixture
def admin_app():
    return admin_server.app


@pytest.fixture
def app_ctx(admin_app):
    with admin_app.app_context():
        yield


@pytest.fixture
def client(admin_app):
    """Admin server client without a session."""
    return admin_app.test_client()


@pytest.fixture
def public_client():
    return public_server.app.test_client()


@pytest.fixture
def master_client(admin_app):
    c = admin_app.test_client()
    resp = login(c, **MASTER)
    assert resp.status_code == 200
    return c


@pytest.fixture
def admin_client(admin_app):
    """Client logged in as a plain (non-master) admin."""
    with admin_app.app_context():
        admin_service.create_admin(ADMIN["username"], ADMIN["password"])
    c = admin_app.test_client()
    resp = login(c, **ADMIN)
    assert resp.status_code == 200
    return c


@pytest.fixture
def uploaded_image(admin_client):
    """One image uploaded by the plain admin; returns its JSON."""
    resp = upload(admin_client, (jpeg_bytes(), "sunset.jpg"))
    assert resp.status_code == 200
    return resp.get_json()[0]
