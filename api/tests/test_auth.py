import pytest

from dashboard.auth import hash_password, verify_password, create_session_token, verify_session_token
from dashboard.config import get_settings
from dashboard.main import app


@pytest.fixture(scope="module")
def password_hash():
    return hash_password("wipe-day")


@pytest.fixture
def auth_enabled(monkeypatch, password_hash):
    monkeypatch.setattr(get_settings(), "dashboard_password_hash", password_hash)


def test_password_hashing(password_hash):
    assert verify_password("wipe-day", password_hash)
    assert not verify_password("wrong", password_hash)
    assert not verify_password("wipe-day", "")


def test_session_token_roundtrip():
    token = create_session_token()
    assert verify_session_token(token)
    assert not verify_session_token(token + "x")


def test_open_when_no_password(client):
    assert client.get("/api/changelog").status_code == 200
    me = client.get("/api/auth/me").json()
    assert me == {"authenticated": True, "auth_enabled": False}


def test_protected_when_password_set(client, auth_enabled):
    assert client.get("/api/changelog").status_code == 401
    assert client.get("/api/stats").status_code == 401


def test_login_flow(client, auth_enabled):
    assert client.post("/api/auth/login", json={"password": "nope"}).status_code == 401

    response = client.post("/api/auth/login", json={"password": "wipe-day"})
    assert response.status_code == 200
    assert "dashboard_session" in response.cookies

    assert client.get("/api/changelog").status_code == 200
    assert client.get("/api/auth/me").json()["auth_enabled"] is True

    client.post("/api/auth/logout")
    assert client.get("/api/changelog").status_code == 401


def test_health_is_always_open(client, auth_enabled):
    assert client.get("/api/health").status_code == 200


def test_only_session_routes_exposed():
    paths = {route.path for route in app.routes if route.path.startswith("/api/auth")}
    assert paths == {"/api/auth/login", "/api/auth/logout", "/api/auth/me"}
