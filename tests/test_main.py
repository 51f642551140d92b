# tests/test_main.py
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

import pms_service.main as main
from pms_service.config import Settings
from pms_service.context import AppContext
from pms_service.main import create_app
from pms_service.models import UserStore


def test_health_ok(client, monkeypatch):
    monkeypatch.setattr(main, "ping", lambda db: True)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "pms_service", "database": "up"}


def test_health_reports_database_down(client, monkeypatch):
    monkeypatch.setattr(main, "ping", lambda db: False)
    r = client.get("/health")
    assert r.status_code == 503
    assert r.json()["status"] == "unavailable"


def test_metrics_exposed(client):
    client.get("/api/auth/logout")
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "pms_requests_total" in r.text


def test_cors_allows_any_origin(client):
    r = client.options(
        "/api/auth/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_unknown_route_uses_message_body(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "message" in r.json()


def test_startup_fails_when_database_unreachable(monkeypatch):
    def fail(settings):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(AppContext, "build", classmethod(lambda cls, settings: fail(settings)))
    app = create_app(Settings(jwt_secret="x"))
    with pytest.raises(ServerSelectionTimeoutError):
        with TestClient(app):
            pass


def test_internal_error_keeps_cors_headers(client, monkeypatch):
    def boom(self, email):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(UserStore, "find_by_email", boom)
    r = client.post(
        "/api/auth/login",
        json={"email": "ana@example.com", "password": "x"},
        headers={"Origin": "http://localhost:3000"},
    )

    assert r.status_code == 500
    assert r.json() == {"message": "Internal Server Error"}
    assert r.headers["access-control-allow-origin"] == "*"


def test_create_app_configures_logging(app_context, monkeypatch):
    levels = []
    monkeypatch.setattr(main, "configure_logging", lambda level="INFO": levels.append(level))
    create_app(context=app_context)
    assert levels == [app_context.settings.log_level]
