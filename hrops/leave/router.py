"""Leave router — apply, list, approve / reject."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.dependencies import get_actor
from hrops.common.constants import LeaveStatus
from hrops.common.pagination import PaginationParams
from hrops.database import get_db
from hrops.leave.schemas import LeaveCreate, LeaveListResponse, LeaveOut, LeaveReview
from hrops.leave.service import LeaveService
from hrops.rules.access import Actor

router = APIRouter(prefix="", tags=["leave"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=LeaveListResponse)
async def list_leaves(
    user_id: Optional[int] = Query(None, gt=0),
    status: Optional[LeaveStatus] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    params: PaginationParams = Depends(),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    page = await LeaveService.list_leaves(
        db, actor, params,
        user_id=user_id, status=status, from_date=from_date, to_date=to_date,
    )
    return LeaveListResponse(
        data=[LeaveOut.model_validate(r) for r in page.data],
        meta=page.meta,
    )


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=LeaveOut, status_code=201)
async def create_leave(
    body: LeaveCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Apply for leave. Overlapping Pending / Approved requests are rejected with 409."""
    return await LeaveService.create_leave(db, actor, body)


# ── PATCH /{leave_id} ───────────────────────────────────────────────

@router.patch("/{leave_id}", response_model=LeaveOut)
async def review_leave(
    leave_id: int,
    body: LeaveReview,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject (Admin / Manager / HR Officer)."""
    return await LeaveService.review_leave(db, actor, leave_id, body.status)
