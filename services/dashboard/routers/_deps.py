"""Shared dependencies for dashboard routers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import Depends, Query, Request

from services.dashboard.client.http import BackendClient
from services.dashboard.client.pagination import PageRequest
from services.dashboard.config import settings
from services.dashboard.errors import AuthenticationExpired, BackendUnavailable
from services.dashboard.sample_data import SampleDataStore
from services.dashboard.sequencer.registry import SequencerRegistry
from services.dashboard.sessions import SessionStore


@dataclass
class DashboardSession:
    session_id: str
    token: str
    user: dict[str, Any] = field(default_factory=dict)


def session_id_from_request(request: Request) -> Optional[str]:
    """Session id from the dashboard cookie, else from `Authorization: Bearer <id>`."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        return session_id
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_registry(request: Request) -> SequencerRegistry:
    return request.app.state.sequencers


def get_sample_data(request: Request) -> SampleDataStore:
    return request.app.state.sample_data


def get_base_client(request: Request) -> BackendClient:
    client = getattr(request.app.state, "backend", None)
    if client is None:
        raise BackendUnavailable("Booking backend client is not initialised.")
    return client


async def require_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> DashboardSession:
    """
    Resolve the caller's dashboard session. No session -> 401, the UI sends
    the user back to the login screen.
    """
    session_id = session_id_from_request(request)
    record = await store.get(session_id) if session_id else None
    if not record or not record.get("token"):
        raise AuthenticationExpired("Please sign in to continue.")
    request.state.session_id = session_id
    return DashboardSession(session_id=session_id, token=record["token"], user=record.get("user") or {})


async def get_backend(
    session: DashboardSession = Depends(require_session),
    base: BackendClient = Depends(get_base_client),
    store: SessionStore = Depends(get_session_store),
) -> BackendClient:
    """Backend client bound to the caller's token. A backend 401 ends the session."""

    async def _clear_session() -> None:
        await store.delete(session.session_id)

    return base.with_credentials(session.token, on_unauthorized=_clear_session)


def page_request(
    pageIndex: int = Query(0, ge=0),
    pageSize: int = Query(settings.default_page_size, ge=1),
    keyword: Optional[str] = Query(None, description="Free-text search"),
    ids: list[str] = Query([]),
    excludeIds: list[str] = Query([]),
) -> PageRequest:
    return PageRequest(
        pageIndex=pageIndex,
        pageSize=min(pageSize, settings.max_page_size),
        keyword=keyword.strip() if keyword and keyword.strip() else None,
        ids=ids,
        excludeIds=excludeIds,
    )
