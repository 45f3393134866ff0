"""Admin router — organisation settings."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.admin.schemas import AttendanceSettings, AttendanceSettingsUpdate
from hrops.admin.service import AdminService
from hrops.auth.dependencies import get_actor
from hrops.common.constants import Action, Resource
from hrops.database import get_db
from hrops.rules.access import Actor, enforce

router = APIRouter(prefix="", tags=["admin"])


@router.get("/attendance-settings", response_model=AttendanceSettings)
async def get_attendance_settings(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    enforce(actor, Action.read, Resource.settings)
    return await AdminService.get_attendance_settings(db)


@router.put("/attendance-settings", response_model=AttendanceSettings)
async def update_attendance_settings(
    body: AttendanceSettingsUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Change attendance thresholds (Admin / HR Officer)."""
    return await AdminService.update_attendance_settings(db, actor, body)
