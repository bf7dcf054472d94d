"""
Bus-booking admin dashboard service -- a backend-for-frontend over the booking
REST backend, plus the seeded bookings / withdrawals / revenue screens.

Entrypoint: uvicorn services.dashboard.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI, Request, Response
from starlette.responses import JSONResponse

from services.dashboard.client.http import BackendClient, create_http_client
from services.dashboard.config import settings
from services.dashboard.middleware.cors import setup_cors
from services.dashboard.middleware.rate_limit import RateLimitMiddleware
from services.dashboard.middleware.sentry import setup_sentry
from services.dashboard.notices import error_notice
from services.dashboard.responses import failure_envelope, install_error_handlers
from services.dashboard.routers import auth, health, transit_points, trip_details, trip_transits, trips
from services.dashboard.routers import bookings, dashboard, profile, withdrawals
from services.dashboard.sample_data import SampleDataStore
from services.dashboard.sequencer.registry import SequencerRegistry
from services.dashboard.sessions import SessionStore

logger = logging.getLogger(__name__)

# Shared redis reference -- set during lifespan, read by rate limiter
_redis_holder: dict = {"client": None}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_sentry()

    # Redis for sessions + rate limiting
    redis_client = None
    if settings.redis_url:
        try:
            redis_client = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            await redis_client.ping()
        except Exception as e:
            # Sessions fall back to process memory, rate limiting passes through
            logger.warning("Redis unavailable, using in-memory sessions: %s", e)
            redis_client = None

    _redis_holder["client"] = redis_client
    app.state.redis = redis_client
    app.state.settings = settings

    http = create_http_client()
    app.state.backend = BackendClient(http)
    app.state.sessions = SessionStore(redis_client, ttl_s=settings.session_ttl_s)
    app.state.sequencers = SequencerRegistry()
    app.state.sample_data = SampleDataStore()

    logger.info(
        "dashboard_started env=%s backend=%s sessions=%s",
        settings.environment,
        settings.backend_base_url,
        "redis" if redis_client is not None else "memory",
    )

    yield

    app.state.sequencers.clear()
    await http.aclose()
    if redis_client:
        await redis_client.aclose()


app = FastAPI(
    title="Bus Admin Dashboard",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# -- Middleware (order matters: last added = outermost in Starlette) --

# Routers first (innermost)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(trips.router)
app.include_router(transit_points.router)
app.include_router(trip_details.router)
app.include_router(trip_transits.router)

# Seeded screens
app.include_router(bookings.router)
app.include_router(withdrawals.router)
app.include_router(dashboard.router)
app.include_router(profile.router)

install_error_handlers(app)


# Request ID injection
@app.middleware("http")
async def request_envelope_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Rate limiting -- uses lazy redis reference from lifespan
class _LazyRateLimitMiddleware(RateLimitMiddleware):
    """Rate limiter that picks up Redis client after lifespan init."""

    def __init__(self, app):
        super().__init__(app, redis_client=None)

    async def dispatch(self, request, call_next):
        self.redis = _redis_holder.get("client")
        return await super().dispatch(request, call_next)


app.add_middleware(_LazyRateLimitMiddleware)

# CORS last so it is outermost: preflight and 429s both carry the CORS headers
setup_cors(app)


# -- Exception Handlers --

@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=failure_envelope(request, "NOT_FOUND", "Resource not found."),
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    logger.exception("unhandled_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=failure_envelope(
            request,
            "INTERNAL_ERROR",
            "An unexpected error occurred.",
            [error_notice("Error", "An unexpected error occurred.")],
        ),
    )
