# tests/conftest.py
import uuid

import mongomock
import pytest
from fastapi.testclient import TestClient

from pms_service.config import Settings
from pms_service.context import AppContext
from pms_service.db import USERS_COLLECTION, ensure_indexes
from pms_service.main import create_app
from pms_service.models import UserStore
from pms_service.payments import SimulatedGateway

TEST_SECRET = "test-secret"
TEST_PASSWORD = "password123"


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, payment_delay_seconds=0)


@pytest.fixture
def app_context(settings):
    """Contexto con MongoDB en memoria (mongomock) y pasarela sin demora."""
    db = mongomock.MongoClient()["pms_test"]
    collection = db[USERS_COLLECTION]
    ensure_indexes(collection)
    return AppContext(
        settings=settings,
        db=db,
        users=UserStore(collection),
        gateway=SimulatedGateway(delay_seconds=0),
    )


@pytest.fixture
def client(app_context):
    with TestClient(create_app(context=app_context)) as c:
        yield c


@pytest.fixture
def new_user_payload():
    """Genera datos de registro únicos por cada llamada."""
    def _make(**overrides):
        suffix = uuid.uuid4().hex[:8]
        payload = {
            "username": f"user_{suffix}",
            "email": f"testuser_{suffix}@example.com",
            "password": TEST_PASSWORD,
        }
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def registered_user(client, new_user_payload):
    """Registra un usuario y devuelve sus datos junto con el token."""
    payload = new_user_payload()
    r = client.post("/api/auth/signup", json=payload)
    assert r.status_code == 201, r.text
    return {**payload, **r.json()}


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}
