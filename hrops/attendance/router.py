"""Attendance router — list, mark / check in, check out or override.

All endpoints require authentication; scoping and role checks live in
the service via the access policy.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.attendance.schemas import (
    AttendanceCreate,
    AttendanceListResponse,
    AttendanceOut,
    AttendanceUpdate,
)
from hrops.attendance.service import AttendanceService
from hrops.auth.dependencies import get_actor
from hrops.common.pagination import PaginationParams
from hrops.database import get_db
from hrops.rules.access import Actor

router = APIRouter(prefix="", tags=["attendance"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=AttendanceListResponse)
async def list_attendance(
    user_id: Optional[int] = Query(None, gt=0),
    on_date: Optional[date] = Query(None, alias="date"),
    params: PaginationParams = Depends(),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    page = await AttendanceService.list_attendance(
        db, actor, params, user_id=user_id, on_date=on_date,
    )
    return AttendanceListResponse(
        data=[AttendanceOut.model_validate(r) for r in page.data],
        meta=page.meta,
    )


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=AttendanceOut, status_code=201)
async def create_attendance(
    body: AttendanceCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Mark attendance. With a check-out, the status is derived from hours worked."""
    return await AttendanceService.create_attendance(db, actor, body)


# ── PATCH /{attendance_id} ──────────────────────────────────────────

@router.patch("/{attendance_id}", response_model=AttendanceOut)
async def update_attendance(
    attendance_id: int,
    body: AttendanceUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService.update_attendance(db, actor, attendance_id, body)
