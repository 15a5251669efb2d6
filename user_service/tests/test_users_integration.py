from __future__ import annotations

from datetime import datetime

import pytest
from flask import Flask
from flask.testing import FlaskClient

from user_service.app import create_app
from user_service.infrastructure.container import Container
from user_service.infrastructure.db import session_scope
from user_service.infrastructure.db.models import UserRow
from user_service.shared.config import AppConfig, RateLimitConfig


@pytest.fixture()
def container(app_config: AppConfig) -> Container:
    return Container(app_config)


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container=container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def _register(client: FlaskClient, email: str = "a@b.com", password: str = "Abcd1234"):
    return client.post(
        "/api/v1/users/register",
        json={"email": email, "password": password, "name": "A"},
    )


def _login(client: FlaskClient, email: str = "a@b.com", password: str = "Abcd1234"):
    return client.post("/api/v1/users/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_then_wrong_password(client: FlaskClient, container: Container) -> None:
    register = _register(client)
    assert register.status_code == 201
    user = register.get_json()
    assert set(user) == {"id", "email", "name", "created_at", "updated_at"}

    with session_scope(container.session_factory) as session:
        row = session.get(UserRow, user["id"])
        assert row is not None
        assert row.password_hash != "Abcd1234"

    login = _login(client, password="wrongpw")
    assert login.status_code == 401
    assert login.get_json()["message"] == "Invalid credentials"


def test_full_account_lifecycle(client: FlaskClient, container: Container) -> None:
    user_id = _register(client).get_json()["id"]

    login = _login(client)
    assert login.status_code == 200
    token = login.get_json()["token"]
    claims = container.token_service.validate(token)
    assert claims.user_id == user_id
    assert claims.email == "a@b.com"

    profile = client.get("/api/v1/users/profile", headers=_bearer(token))
    assert profile.status_code == 200
    assert profile.get_json()["name"] == "A"

    updated = client.put("/api/v1/users/profile", json={"name": "B"}, headers=_bearer(token))
    assert updated.status_code == 200
    assert updated.get_json()["name"] == "B"
    assert updated.get_json()["email"] == "a@b.com"
    assert datetime.fromisoformat(updated.get_json()["updated_at"]) > datetime.fromisoformat(
        profile.get_json()["updated_at"]
    )

    refreshed = client.post("/api/v1/users/refresh-token", headers=_bearer(token))
    assert refreshed.status_code == 200
    assert set(refreshed.get_json()) == {"token", "expires_at"}

    changed = client.put(
        "/api/v1/users/password",
        json={"current_password": "Abcd1234", "new_password": "Newpass99"},
        headers=_bearer(token),
    )
    assert changed.status_code == 200
    assert _login(client).status_code == 401
    assert _login(client, password="Newpass99").status_code == 200

    deleted = client.delete("/api/v1/users/profile", headers=_bearer(token))
    assert deleted.status_code == 204

    assert client.get("/api/v1/users/profile", headers=_bearer(token)).status_code == 404
    assert client.post("/api/v1/users/refresh-token", headers=_bearer(token)).status_code == 401
    assert _login(client, password="Newpass99").status_code == 401
    assert _register(client).status_code == 409


def test_duplicate_registration(client: FlaskClient) -> None:
    assert _register(client).status_code == 201

    duplicate = _register(client, password="Other1234")

    assert duplicate.status_code == 409
    assert duplicate.get_json()["message"] == "Email already exists"


def test_registration_validation_errors(client: FlaskClient) -> None:
    bad_email = _register(client, email="not-an-email")
    weak = _register(client, password="abcdefgh")

    assert bad_email.status_code == 400
    assert bad_email.get_json()["error"] == "invalid_email"
    assert weak.status_code == 400
    assert weak.get_json()["message"] == "Password does not meet security requirements"


def test_change_password_wrong_current_password(client: FlaskClient) -> None:
    _register(client)
    token = _login(client).get_json()["token"]

    response = client.put(
        "/api/v1/users/password",
        json={"current_password": "wrongpw", "new_password": "Newpass99"},
        headers=_bearer(token),
    )

    assert response.status_code == 401
    assert _login(client).status_code == 200


def test_health_and_headers(client: FlaskClient) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok"}
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_unknown_route_stays_404(client: FlaskClient) -> None:
    assert client.get("/api/v1/users/nope").status_code == 404


def test_register_rate_limited(app_config: AppConfig) -> None:
    app_config.rate_limit = RateLimitConfig(enabled=True, requests=1, window=60)
    client = create_app(app_config).test_client()

    assert _register(client).status_code == 201
    limited = _register(client, email="c@d.com")

    assert limited.status_code == 429
    assert limited.get_json()["error"] == "rate_limited"
