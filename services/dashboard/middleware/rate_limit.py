"""
Redis-backed sliding window rate limiter.

Tiers:
  - Login attempts (POST /auth/login): settings.rate_limit_login_per_min per IP
  - Everything else: settings.rate_limit_auth_per_min per session (or IP)

Passes every request through when no Redis client is configured.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from services.dashboard.config import settings
from services.dashboard.notices import error_notice
from services.dashboard.responses import failure_envelope

LOGIN_PATH = "/auth/login"
EXEMPT_PATHS = {"/health"}


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _get_rate_limit(request: Request) -> tuple[int, str, str]:
    """Return (limit_per_min, tier_name, client_key) for the request."""
    if request.url.path == LOGIN_PATH and request.method == "POST":
        return settings.rate_limit_login_per_min, "login", f"ip:{_client_ip(request)}"

    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        auth = request.headers.get("authorization", "")
        if auth.lower().startswith("bearer "):
            session_id = auth.split(" ", 1)[1].strip()
    if session_id:
        # Only a prefix: the key must not leak a usable session id.
        return settings.rate_limit_auth_per_min, "auth", f"session:{session_id[:16]}"
    return settings.rate_limit_auth_per_min, "auth", f"ip:{_client_ip(request)}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding window rate limiter backed by Redis sorted sets."""

    def __init__(self, app, redis_client=None):
        super().__init__(app)
        self.redis = redis_client

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXEMPT_PATHS or self.redis is None:
            return await call_next(request)

        limit, tier, client_key = _get_rate_limit(request)
        window_key = f"ratelimit:{tier}:{client_key}"

        now = time.time()
        window_start = now - 60.0  # 1-minute sliding window

        pipe = self.redis.pipeline()
        pipe.zremrangebyscore(window_key, 0, window_start)
        pipe.zcard(window_key)
        pipe.zadd(window_key, {f"{now}:{id(request)}": now})
        pipe.expire(window_key, 120)
        results = await pipe.execute()

        current_count = results[1]

        headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(max(0, limit - current_count - 1)),
            "X-RateLimit-Reset": str(int(now + 60)),
        }

        if current_count >= limit:
            headers["Retry-After"] = "60"
            message = f"Rate limit exceeded. Max {limit} requests per minute for {tier} tier."
            return JSONResponse(
                status_code=429,
                content=failure_envelope(
                    request,
                    "RATE_LIMITED",
                    message,
                    [error_notice("Too many requests", message)],
                ),
                headers=headers,
            )

        response = await call_next(request)
        for key, value in headers.items():
            response.headers[key] = value
        return response
