"""Login / logout / current user against the backend's /iam/auth endpoints."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import LoginCredentials, LoginResult
from services.dashboard.errors import DashboardError

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def login(self, credentials: LoginCredentials) -> LoginResult:
        data = await self._client.post("/iam/auth/login", credentials.model_dump())
        return LoginResult.model_validate(data)

    async def logout(self, clear_credentials: Callable[[], Awaitable[None]]) -> None:
        """Tell the backend, then drop local credentials whatever it answered."""
        try:
            await self._client.post("/iam/auth/logout")
        except DashboardError as exc:
            logger.warning("logout_backend_failed: %s", exc.message)
        finally:
            await clear_credentials()

    async def get_current_user(self) -> dict[str, Any]:
        return await self._client.get("/iam/auth/me") or {}
