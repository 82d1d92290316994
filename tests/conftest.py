import json
import os
import shutil
import tempfile
import pytest
from fastapi.testclient import TestClient
from app.content import store
from app.core import config
from app.core.security import sessions

ADMIN_PASSWORD = "test-password"


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Point the content store at a temporary file and reset admin sessions"""
    # Store original values
    original_content_file = store.CONTENT_FILE
    original_password = config.settings.ADMIN_PASSWORD
    original_upgrade = config.settings.UPGRADE_LEGACY_QUANTITY

    temp_dir = tempfile.mkdtemp()
    store.CONTENT_FILE = os.path.join(temp_dir, "data", "content.json")
    config.settings.ADMIN_PASSWORD = ADMIN_PASSWORD
    config.settings.UPGRADE_LEGACY_QUANTITY = False
    sessions.clear()

    yield

    # Restore original values
    store.CONTENT_FILE = original_content_file
    config.settings.ADMIN_PASSWORD = original_password
    config.settings.UPGRADE_LEGACY_QUANTITY = original_upgrade
    sessions.clear()
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def content_file():
    return store.CONTENT_FILE


@pytest.fixture
def write_content(content_file):
    """Write a document straight to disk, bypassing the save pipeline"""
    def _write(document):
        os.makedirs(os.path.dirname(content_file), exist_ok=True)
        with open(content_file, "w", encoding="utf-8") as f:
            json.dump(document, f)
    return _write


@pytest.fixture
def read_content(content_file):
    def _read():
        with open(content_file, "r", encoding="utf-8") as f:
            return json.load(f)
    return _read


@pytest.fixture
def client():
    from app.main import app
    return TestClient(app)


@pytest.fixture
def admin_client(client):
    """Logged-in client; the CSRF token is stored on `client.csrf_token`"""
    response = client.post("/admin/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    client.csrf_token = response.json()["csrf_token"]
    return client
