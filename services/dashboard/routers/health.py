"""Liveness for the dashboard BFF: build info plus what this process holds in memory."""

from fastapi import APIRouter, Request

from services.dashboard.responses import envelope

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    state = request.app.state
    return envelope(
        request,
        {
            "status": "healthy",
            "version": state.settings.app_version,
            "environment": state.settings.environment,
            "sessionStore": "redis" if getattr(state, "redis", None) is not None else "memory",
            "trackedTrips": len(state.sequencers),
        },
    )
