"""
Response envelope.

Routes collect notices while they work and return them next to the payload so
the dashboard can show them as toasts.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from services.dashboard.errors import DashboardError
from services.dashboard.notices import Notice, error_notice

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def envelope(
    request: Request,
    data: Any = None,
    notices: Optional[list[Notice]] = None,
) -> dict:
    """Standard success envelope."""
    return {
        "success": True,
        "data": data,
        "notices": [n.model_dump() for n in (notices or [])],
        "requestId": _request_id(request),
    }


def failure_envelope(
    request: Request,
    code: str,
    message: str,
    notices: Optional[list[Notice]] = None,
) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message},
        "notices": [n.model_dump() for n in (notices or [])],
        "requestId": _request_id(request),
    }


def install_error_handlers(app: FastAPI) -> None:
    """Render DashboardError subclasses and request validation errors as envelopes."""

    @app.exception_handler(DashboardError)
    async def _dashboard_error(request: Request, exc: DashboardError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("request_failed path=%s code=%s: %s", request.url.path, exc.code, exc.message)
        notices = list(exc.notices)
        if not notices:
            notices = [error_notice(exc.title, exc.message)]
        return JSONResponse(
            status_code=exc.status_code,
            content=failure_envelope(request, exc.code, exc.message, notices),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else "Invalid request."
        return JSONResponse(
            status_code=422,
            content=failure_envelope(
                request,
                "VALIDATION_ERROR",
                message,
                [error_notice("Invalid input", message)],
            ),
        )
