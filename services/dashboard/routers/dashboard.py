"""Revenue dashboard: series and totals per month of a year, or per year."""

from fastapi import APIRouter, Depends, Query, Request

from services.dashboard.responses import envelope
from services.dashboard.routers._deps import DashboardSession, get_sample_data, require_session
from services.dashboard.sample_data import SampleDataStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(
    request: Request,
    period: str = Query("monthly", description="monthly | yearly"),
    year: str = Query("2024", description="Year shown by the monthly view"),
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    return envelope(request, store.dashboard_stats(period, year))
