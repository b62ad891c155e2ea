from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from users_api.api import create_app
from users_api.config import Settings
from users_api.security import TokenAuthenticator
from users_api.store import UserStore

AUTH = {"Authorization": "Bearer valid-token"}


class ExplodingStore(UserStore):
    def list_users(self):
        raise RuntimeError("backing collection corrupted")


class ExplodingAuthenticator(TokenAuthenticator):
    def authenticate(self, header_value):
        raise RuntimeError("token backend unavailable")


def _request_messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [record.getMessage() for record in caplog.records if record.name == "users_api.requests"]


def test_handler_failure_becomes_generic_500(caplog: pytest.LogCaptureFixture) -> None:
    app = create_app(store=ExplodingStore(), settings=Settings())
    caplog.set_level(logging.ERROR, logger="users_api.errors")

    with TestClient(app) as client:
        response = client.get("/users", headers=AUTH)

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Internal server error."}
    assert "corrupted" not in response.text
    assert any(record.name == "users_api.errors" and record.exc_info for record in caplog.records)


def test_authentication_failure_is_recovered_by_outer_stage() -> None:
    app = create_app(authenticator=ExplodingAuthenticator(["valid-token"]), settings=Settings())

    with TestClient(app) as client:
        response = client.get("/users", headers=AUTH)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error."}


def test_authorized_request_is_logged_with_status(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="users_api.requests")
    app = create_app(settings=Settings())

    with TestClient(app) as client:
        client.get("/users/99", headers=AUTH)

    assert _request_messages(caplog) == ["Request: GET /users/99", "Response: 404"]


def test_unauthorized_request_never_reaches_logging_stage(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="users_api.requests")
    store = UserStore(Settings().seed_users)
    app = create_app(store=store, settings=Settings())

    with TestClient(app) as client:
        response = client.delete("/users/1", headers={"Authorization": "Bearer wrong-token"})

    assert response.status_code == 401
    assert _request_messages(caplog) == []
    assert store.get(1) is not None


def test_route_added_later_is_still_wrapped() -> None:
    app = create_app(settings=Settings())

    @app.get("/boom")
    async def boom() -> None:
        raise ZeroDivisionError("division by zero")

    with TestClient(app) as client:
        unauthorized = client.get("/boom")
        failed = client.get("/boom", headers=AUTH)

    assert unauthorized.status_code == 401
    assert failed.status_code == 500
    assert failed.json() == {"error": "Internal server error."}
