"""
BackendClient -- thin async wrapper over httpx for the booking REST backend.

One httpx.AsyncClient (connection pool) is opened in the app lifespan and
shared; each request gets a lightweight BackendClient bound to the caller's
bearer token via with_credentials().

Error mapping (nothing is retried):
  401            -> on_unauthorized() callback, then AuthenticationExpired
  other 4xx/5xx  -> BackendError(backend_status=...)
  timeout/network-> BackendUnavailable
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx

from services.dashboard.config import Settings, settings as default_settings
from services.dashboard.errors import AuthenticationExpired, BackendError, BackendUnavailable

logger = logging.getLogger(__name__)

UnauthorizedHook = Callable[[], Awaitable[None]]

QueryParams = Sequence[tuple[str, str]] | dict[str, Any]


def create_http_client(config: Optional[Settings] = None, **kwargs: Any) -> httpx.AsyncClient:
    """Build the shared httpx client from settings. Extra kwargs go to httpx (tests pass transport=)."""
    config = config or default_settings
    return httpx.AsyncClient(
        base_url=config.backend_base_url,
        timeout=config.backend_timeout_s,
        headers={"Content-Type": "application/json"},
        **kwargs,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return f"HTTP {response.status_code}"


class BackendClient:
    """
    Usage:
        client = BackendClient(http).with_credentials(token, on_unauthorized=clear_session)
        trips = await client.get("/trips", params=[("pageIndex", "0"), ("pageSize", "10")])
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        token: Optional[str] = None,
        on_unauthorized: Optional[UnauthorizedHook] = None,
    ) -> None:
        self._http = http
        self._token = token
        self._on_unauthorized = on_unauthorized

    @property
    def token(self) -> Optional[str]:
        return self._token

    def with_credentials(
        self,
        token: Optional[str],
        on_unauthorized: Optional[UnauthorizedHook] = None,
    ) -> "BackendClient":
        """Return a client sharing the same pool but bound to another token."""
        return BackendClient(self._http, token=token, on_unauthorized=on_unauthorized)

    def _headers(self) -> dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[QueryParams] = None,
        json: Any = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None for empty bodies)."""
        try:
            response = await self._http.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._headers(),
            )
        except httpx.TimeoutException as exc:
            logger.warning("backend_timeout %s %s: %s", method, path, exc)
            raise BackendUnavailable("The booking service did not answer in time.") from exc
        except httpx.TransportError as exc:
            logger.warning("backend_unreachable %s %s: %s", method, path, exc)
            raise BackendUnavailable("The booking service is unreachable.") from exc

        if response.status_code == 401:
            logger.info("backend_unauthorized %s %s", method, path)
            if self._on_unauthorized is not None:
                await self._on_unauthorized()
            raise AuthenticationExpired("Your session has expired. Please sign in again.")

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "backend_error %s %s status=%d: %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise BackendError(message, backend_status=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError("The booking service sent an unreadable response.") from exc

    async def get(self, path: str, *, params: Optional[QueryParams] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
