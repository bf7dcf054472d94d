"""HTTP tests for /auth (login, logout, me) and session resolution."""

from __future__ import annotations

import pytest

from services.dashboard.config import settings
from services.dashboard.tests.helpers.fake_backend import ADMIN_EMAIL, ADMIN_PASSWORD, VALID_TOKEN


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_opens_session_and_sets_cookie(self, client, app, backend):
        response = await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isAuthenticated"] is True
        assert data["user"]["email"] == ADMIN_EMAIL
        assert response.cookies.get(settings.session_cookie_name) == data["sessionId"]

        record = await app.state.sessions.get(data["sessionId"])
        assert record["token"] == VALID_TOKEN

    @pytest.mark.asyncio
    async def test_bad_credentials(self, client, backend):
        response = await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})

        assert response.status_code == 401
        body = response.json()
        assert body["error"]["code"] == "UNAUTHORIZED"
        assert body["notices"][0]["title"] == "Login failed"
        assert settings.session_cookie_name not in response.cookies

    @pytest.mark.asyncio
    async def test_backend_down_is_not_reported_as_bad_credentials(self, client, backend):
        backend.fail_next("POST", "/iam/auth/login", 503)
        response = await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        response = await client.post("/auth/login", json={"email": ADMIN_EMAIL})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestSession:
    @pytest.mark.asyncio
    async def test_cookie_session_reaches_backend_with_token(self, client, backend):
        await client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        response = await client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == ADMIN_EMAIL

    @pytest.mark.asyncio
    async def test_unknown_session(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-session"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_drops_session(self, authed_client, app, session_id, backend):
        response = await authed_client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json()["data"]["isAuthenticated"] is False
        assert await app.state.sessions.get(session_id) is None
        assert ("POST", "/iam/auth/logout") in backend.calls

    @pytest.mark.asyncio
    async def test_logout_survives_backend_failure(self, authed_client, app, session_id, backend):
        backend.fail_next("POST", "/iam/auth/logout", 500)
        response = await authed_client.post("/auth/logout")
        assert response.status_code == 200
        assert await app.state.sessions.get(session_id) is None
