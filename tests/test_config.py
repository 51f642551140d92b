# tests/test_config.py
import pytest

from pms_service.config import INSECURE_JWT_SECRET, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PORT", "HOST", "MONGO_URI", "MONGO_DB_NAME", "JWT_SECRET", "PAYMENT_DELAY_SECONDS", "MONGO_TIMEOUT_MS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    # Evita que un .env local interfiera
    monkeypatch.setattr("pms_service.config.load_dotenv", lambda: None)


def test_defaults():
    settings = Settings.from_env()
    assert settings.port == 5001
    assert settings.mongo_db_name == "pms"
    assert settings.jwt_secret == INSECURE_JWT_SECRET


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/parking")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("PAYMENT_DELAY_SECONDS", "0.2")

    settings = Settings.from_env()
    assert settings.port == 8080
    assert settings.mongo_uri == "mongodb://db:27017/parking"
    assert settings.mongo_db_name == "parking"
    assert settings.jwt_secret == "s3cret"
    assert settings.payment_delay_seconds == 0.2


def test_explicit_db_name_wins(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/parking")
    monkeypatch.setenv("MONGO_DB_NAME", "other")
    assert Settings.from_env().mongo_db_name == "other"


def test_invalid_port_raises(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-number")
    with pytest.raises(ValueError):
        Settings.from_env()
