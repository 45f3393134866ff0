"""Admin service — the settings source for attendance thresholds."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.admin.schemas import AttendanceSettings, AttendanceSettingsUpdate
from hrops.common.audit import create_audit_entry
from hrops.common.constants import ATTENDANCE_SETTINGS_KEY, Action, Resource
from hrops.common.exceptions import InvalidInputException
from hrops.common.models import AppSetting
from hrops.config import settings
from hrops.rules.access import Actor, enforce

logger = logging.getLogger(__name__)


def default_attendance_settings() -> AttendanceSettings:
    return AttendanceSettings(
        full_day_hours=settings.FULL_DAY_HOURS,
        half_day_min_hours=settings.HALF_DAY_MIN_HOURS,
        working_hours_start=settings.WORKING_HOURS_START,
        working_hours_end=settings.WORKING_HOURS_END,
    )


class AdminService:
    """Static service class for admin operations."""

    @staticmethod
    async def get_attendance_settings(db: AsyncSession) -> AttendanceSettings:
        """Stored thresholds, with config defaults for any missing key.

        An invalid stored document is logged and replaced by the defaults.
        """
        row = await db.get(AppSetting, ATTENDANCE_SETTINGS_KEY)
        defaults = default_attendance_settings()
        base = defaults.model_dump()
        if row is not None and isinstance(row.value, dict):
            base.update({k: v for k, v in row.value.items() if k in base and v is not None})
        try:
            return AttendanceSettings(**base)
        except ValidationError as exc:
            logger.error(
                "Stored attendance settings are invalid, using defaults: %s",
                exc.errors(include_url=False),
            )
            return defaults

    @staticmethod
    async def update_attendance_settings(
        db: AsyncSession,
        actor: Actor,
        data: AttendanceSettingsUpdate,
    ) -> AttendanceSettings:
        enforce(actor, Action.update, Resource.settings)

        current = await AdminService.get_attendance_settings(db)
        merged = current.model_dump()
        merged.update(data.model_dump(exclude_unset=True, exclude_none=True))
        try:
            updated = AttendanceSettings(**merged)
        except ValidationError as exc:
            errors: dict[str, list[str]] = {}
            for err in exc.errors():
                field = ".".join(str(p) for p in err.get("loc", ())) or "settings"
                errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
            raise InvalidInputException(errors) from exc

        row = await db.get(AppSetting, ATTENDANCE_SETTINGS_KEY)
        if row is None:
            row = AppSetting(
                key=ATTENDANCE_SETTINGS_KEY,
                value=updated.model_dump(),
                description="Attendance status thresholds and working hours.",
                updated_by=actor.id,
            )
            db.add(row)
        else:
            row.value = updated.model_dump()
            row.updated_by = actor.id
        await db.flush()

        await create_audit_entry(
            db,
            action="update",
            entity_type="app_setting",
            entity_id=ATTENDANCE_SETTINGS_KEY,
            actor_id=actor.id,
            old_values=current.model_dump(),
            new_values=updated.model_dump(),
        )
        logger.info("User %s updated attendance settings: %s", actor.id, updated.model_dump())
        return updated
