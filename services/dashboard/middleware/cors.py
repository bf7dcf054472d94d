"""
CORS for the dashboard UI hosts listed in settings.cors_origins.

The UI sends the session as a cookie or as `Authorization: Bearer <session id>`,
mutates transit stops with PUT/PATCH/DELETE, and reads the request id and the
rate-limit counters from response headers, so those are exposed.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.dashboard.config import settings

EXPOSED_HEADERS = [
    "X-Request-ID",
    "X-RateLimit-Limit",
    "X-RateLimit-Remaining",
    "X-RateLimit-Reset",
    "Retry-After",
]


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=EXPOSED_HEADERS,
        max_age=600,
    )
