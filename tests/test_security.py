from datetime import timedelta

import pytest

from core.errors import AuthenticationException
from core.security import ANONYMOUS_USER, create_access_token, decode_access_token, get_current_user
from core.settings import Settings, get_settings
from main import app


def test_token_round_trip():
    token = create_access_token("tester@example.com")
    assert decode_access_token(token) == "tester@example.com"


def test_expired_token_rejected():
    token = create_access_token("tester@example.com", expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationException):
        decode_access_token(token)


def test_token_signed_with_other_secret_rejected():
    token = create_access_token("tester@example.com", settings=Settings(secret_key="someone-else"))
    with pytest.raises(AuthenticationException):
        decode_access_token(token)


def test_missing_token_is_401(anon_client):
    resp = anon_client.get("/api/parts")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authorized, no token"


def test_garbage_token_is_401(anon_client):
    resp = anon_client.get("/api/reports/low-stock", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authorized"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_valid_token_passes(client):
    assert client.get("/api/products").status_code == 200


def test_health_is_public(anon_client):
    assert anon_client.get("/health").json() == {"status": "ok"}


def test_auth_can_be_disabled():
    settings = Settings(auth_enabled=False)
    assert get_current_user(credentials=None, settings=settings) == ANONYMOUS_USER


def test_disabled_auth_over_http(anon_client):
    app.dependency_overrides[get_settings] = lambda: Settings(auth_enabled=False)
    try:
        assert anon_client.get("/api/parts").status_code == 200
    finally:
        app.dependency_overrides.pop(get_settings, None)
