"""
Shared test fixtures: a throwaway JSON store and an app bound to it.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.database import JsonFileBackend, Storage
from webapp.app import create_app
from webapp.services import email_service


@pytest.fixture(autouse=True)
def no_email(monkeypatch):
    monkeypatch.setattr(email_service, "SENDER_EMAIL", None)
    monkeypatch.setattr(email_service, "SENDER_PASSWORD", None)


@pytest.fixture
def storage(tmp_path):
    store = Storage(JsonFileBackend(tmp_path / "data", tmp_path / "backups"))
    store.init()
    return store


@pytest.fixture
def app(tmp_path, storage):
    return create_app(
        {"TESTING": True, "SEED_DEMO_DATA": False, "DATA_DIR": tmp_path / "data"},
        storage=storage,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(client):
    resp = client.post('/api/auth/signup', json={
        'username': 'wanjiku',
        'email': 'wanjiku@example.com',
        'password': 'secret123',
    })
    assert resp.status_code == 200
    return resp.get_json()['user']
