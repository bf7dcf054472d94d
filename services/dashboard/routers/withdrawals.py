"""
Withdrawal requests (seeded data).

  GET  /withdrawals                          -- paginated search, optional status filter
  GET  /withdrawals/{withdrawal_id}
  POST /withdrawals/{withdrawal_id}/approve  -- body: {"notes": "..."} (optional)
  POST /withdrawals/{withdrawal_id}/reject
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from services.dashboard.client.pagination import PageRequest
from services.dashboard.notices import success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import DashboardSession, get_sample_data, page_request, require_session
from services.dashboard.sample_data import SampleDataStore, WithdrawalStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/withdrawals", tags=["withdrawals"])


class WithdrawalDecision(BaseModel):
    notes: Optional[str] = None


@router.get("")
async def list_withdrawals(
    request: Request,
    page: PageRequest = Depends(page_request),
    status: Optional[WithdrawalStatus] = Query(None),
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    result = store.search_withdrawals(page, status.value if status else None)
    return envelope(request, result.model_dump(mode="json"))


@router.get("/{withdrawal_id}")
async def get_withdrawal(
    withdrawal_id: str,
    request: Request,
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    return envelope(request, store.get_withdrawal(withdrawal_id).model_dump())


@router.post("/{withdrawal_id}/approve")
async def approve_withdrawal(
    withdrawal_id: str,
    request: Request,
    body: Optional[WithdrawalDecision] = None,
    session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    updated = store.decide_withdrawal(withdrawal_id, "approved", body.notes if body else None)
    logger.info("withdrawal_approved_by user=%s id=%s", session.user.get("email", "?"), withdrawal_id)
    return envelope(
        request,
        updated.model_dump(),
        [success_notice("Withdrawal Approved", f"Withdrawal {withdrawal_id} has been approved.")],
    )


@router.post("/{withdrawal_id}/reject")
async def reject_withdrawal(
    withdrawal_id: str,
    request: Request,
    body: Optional[WithdrawalDecision] = None,
    session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    updated = store.decide_withdrawal(withdrawal_id, "rejected", body.notes if body else None)
    logger.info("withdrawal_rejected_by user=%s id=%s", session.user.get("email", "?"), withdrawal_id)
    return envelope(
        request,
        updated.model_dump(),
        [success_notice("Withdrawal Rejected", f"Withdrawal {withdrawal_id} has been rejected.")],
    )
