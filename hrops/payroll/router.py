"""Payroll router — list, create, status updates."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.dependencies import get_actor
from hrops.common.constants import PayrollStatus
from hrops.common.pagination import PaginationParams
from hrops.database import get_db
from hrops.payroll.schemas import (
    PayrollCreate,
    PayrollListResponse,
    PayrollOut,
    PayrollStatusUpdate,
)
from hrops.payroll.service import PayrollService
from hrops.rules.access import Actor

router = APIRouter(prefix="", tags=["payroll"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=PayrollListResponse)
async def list_payroll(
    user_id: Optional[int] = Query(None, gt=0),
    month: Optional[str] = Query(None, max_length=20),
    status: Optional[PayrollStatus] = Query(None),
    params: PaginationParams = Depends(),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Employees see their own payslips; privileged roles see everyone's."""
    page = await PayrollService.list_payroll(
        db, actor, params, user_id=user_id, month=month, status=status,
    )
    return PayrollListResponse(
        data=[PayrollOut.model_validate(r) for r in page.data],
        meta=page.meta,
    )


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=PayrollOut, status_code=201)
async def create_payroll(
    body: PayrollCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await PayrollService.create_payroll(db, actor, body)


# ── PATCH /{payroll_id} ─────────────────────────────────────────────

@router.patch("/{payroll_id}", response_model=PayrollOut)
async def update_payroll_status(
    payroll_id: int,
    body: PayrollStatusUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await PayrollService.update_status(db, actor, payroll_id, body.status)
