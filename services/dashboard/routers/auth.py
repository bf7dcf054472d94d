"""
Login flow.

  POST /auth/login   -- exchange email/password for a backend token, open a session
  POST /auth/logout  -- tell the backend, drop the session whatever it answers
  GET  /auth/me      -- current user as the backend sees it
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from services.dashboard.client.auth import AuthService
from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import LoginCredentials
from services.dashboard.config import settings
from services.dashboard.errors import AuthenticationExpired, BackendError
from services.dashboard.notices import error_notice, success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import (
    DashboardSession,
    get_backend,
    get_base_client,
    get_session_store,
    require_session,
)
from services.dashboard.sessions import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_BAD_CREDENTIALS = "Email or password is incorrect. Please try again."


@router.post("/login")
async def login(
    body: LoginCredentials,
    request: Request,
    response: Response,
    base: BackendClient = Depends(get_base_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        result = await AuthService(base.with_credentials(None)).login(body)
    except (AuthenticationExpired, BackendError) as exc:
        if exc.status_code not in (400, 401, 403, 404):
            raise
        logger.info("login_rejected email=%s status=%d", body.email, exc.status_code)
        failure = AuthenticationExpired(_BAD_CREDENTIALS)
        failure.notices = [error_notice("Login failed", _BAD_CREDENTIALS)]
        raise failure from exc

    user = result.user.model_dump()
    session_id = await store.create(result.token, user)
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        max_age=settings.session_ttl_s,
        httponly=True,
        secure=settings.environment != "development",
        samesite="lax",
    )
    logger.info("login_ok email=%s role=%s", result.user.email, result.user.role)
    return envelope(
        request,
        {"sessionId": session_id, "user": user, "isAuthenticated": True},
        [success_notice("Signed in", f"Welcome back, {result.user.name or result.user.email}.")],
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    session: DashboardSession = Depends(require_session),
    client: BackendClient = Depends(get_backend),
    store: SessionStore = Depends(get_session_store),
):
    async def _clear() -> None:
        await store.delete(session.session_id)

    await AuthService(client).logout(_clear)
    response.delete_cookie(settings.session_cookie_name)
    return envelope(request, {"isAuthenticated": False})


@router.get("/me")
async def me(
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    return envelope(request, await AuthService(client).get_current_user())
