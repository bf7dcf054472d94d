"""
Admin profile screen.

  GET  /profile
  PUT  /profile           -- name / email / phone
  POST /profile/password  -- current + new + confirmation
"""

import logging

from fastapi import APIRouter, Depends, Request

from services.dashboard.notices import success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import DashboardSession, get_sample_data, require_session
from services.dashboard.sample_data import PasswordChange, ProfileUpdate, SampleDataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    request: Request,
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    return envelope(request, store.profile.model_dump())


@router.put("")
async def update_profile(
    body: ProfileUpdate,
    request: Request,
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    profile = store.update_profile(body)
    return envelope(
        request,
        profile.model_dump(),
        [success_notice("Profile Updated", "Your profile has been updated successfully.")],
    )


@router.post("/password")
async def change_password(
    body: PasswordChange,
    request: Request,
    session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    changed_at = store.change_password(body)
    logger.info("password_changed user=%s", session.user.get("email", "?"))
    return envelope(
        request,
        {"changedAt": changed_at.isoformat()},
        [success_notice("Password Changed", "Your password has been changed successfully.")],
    )
