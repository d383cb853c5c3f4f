import pytest
from pydantic import ValidationError

from app.core.config import DEV_SECRET_KEY, Settings, settings

from conftest import API


def _settings(monkeypatch, **env) -> Settings:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def test_production_requires_secret_key(monkeypatch):
    with pytest.raises(ValidationError, match="SECRET_KEY must be set"):
        _settings(monkeypatch, ENV="production", SECRET_KEY="")


def test_prod_alias_is_production(monkeypatch):
    with pytest.raises(ValidationError):
        _settings(monkeypatch, ENV="PROD", SECRET_KEY="")


def test_local_falls_back_to_dev_key(monkeypatch):
    s = _settings(monkeypatch, ENV="local", SECRET_KEY="")
    assert s.DEV_SECRET_IN_USE is True
    assert s.SECRET_KEY == DEV_SECRET_KEY
    assert s.is_production is False


def test_explicit_secret_key_wins(monkeypatch):
    s = _settings(monkeypatch, ENV="production", SECRET_KEY="a-real-key")
    assert s.DEV_SECRET_IN_USE is False
    assert s.SECRET_KEY == "a-real-key"
    assert s.is_production is True


def test_postgres_url_normalized(monkeypatch):
    s = _settings(monkeypatch, DATABASE_URL="postgres://u:p@db:5432/hotel")
    assert s.DATABASE_URL == "postgresql+psycopg2://u:p@db:5432/hotel"


def test_refresh_cookie_secure_in_production(client, db, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")
    r = client.post(f"{API}/auth/register",
                    json={"name": "Ana Cruz", "email": "ana@example.com", "password": "Secret123!"})
    assert r.status_code == 201
    cookies = [v for k, v in r.headers.multi_items()
               if k.lower() == "set-cookie" and v.startswith("refreshToken=")]
    assert len(cookies) == 1
    assert "secure" in cookies[0].lower()
