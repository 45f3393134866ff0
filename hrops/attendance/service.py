"""Attendance service layer — mark / check in, check out, manual override.

Business logic:
  - One record per (user, date); enforced by a unique constraint and
    pre-checked for a readable 409
  - Check-out derives the status from worked hours using the live
    thresholds from the settings source
  - Manual status edits bypass the calculation and are privileged
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.admin.service import AdminService
from hrops.attendance.models import AttendanceRecord
from hrops.attendance.schemas import AttendanceCreate, AttendanceUpdate
from hrops.auth.service import get_user
from hrops.common.audit import create_audit_entry
from hrops.common.constants import Action, AttendanceStatus, Resource
from hrops.common.exceptions import (
    ConflictError,
    InvalidInputException,
    NotFoundException,
)
from hrops.common.pagination import PaginatedResponse, PaginationParams, paginate
from hrops.rules.access import Actor, enforce
from hrops.rules.attendance_status import as_utc, compute_status

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("id", "user_id", "date", "status", "check_in", "check_out")


def _duplicate(user_id: int, day: date) -> ConflictError:
    return ConflictError(
        "date",
        day.isoformat(),
        detail=f"Attendance for user {user_id} on {day.isoformat()} is already marked.",
    )


class AttendanceService:
    """Async attendance operations."""

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    async def _derive_status(
        db: AsyncSession,
        check_in: datetime,
        check_out: datetime,
    ) -> AttendanceStatus:
        thresholds = await AdminService.get_attendance_settings(db)
        return compute_status(
            check_in,
            check_out,
            full_day_hours=thresholds.full_day_hours,
            half_day_min_hours=thresholds.half_day_min_hours,
        )

    @staticmethod
    async def _get_record(db: AsyncSession, attendance_id: int) -> AttendanceRecord:
        result = await db.execute(
            select(AttendanceRecord).where(AttendanceRecord.id == attendance_id)
        )
        record = result.scalars().first()
        if record is None:
            raise NotFoundException("Attendance", attendance_id)
        return record

    # ── Reads ───────────────────────────────────────────────────────

    @staticmethod
    async def list_attendance(
        db: AsyncSession,
        actor: Actor,
        params: PaginationParams,
        *,
        user_id: Optional[int] = None,
        on_date: Optional[date] = None,
    ) -> PaginatedResponse:
        """Newest first. Employees only ever see their own rows."""
        decision = enforce(actor, Action.read, Resource.attendance, user_id)

        stmt = select(AttendanceRecord).order_by(
            AttendanceRecord.date.desc(), AttendanceRecord.id.desc()
        )
        if decision.scope_filter is not None:
            stmt = stmt.where(AttendanceRecord.user_id == decision.scope_filter)
        if on_date is not None:
            stmt = stmt.where(AttendanceRecord.date == on_date)
        return await paginate(
            db, stmt, params, model=AttendanceRecord, sortable=SORTABLE_FIELDS,
        )

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_attendance(
        db: AsyncSession,
        actor: Actor,
        data: AttendanceCreate,
    ) -> AttendanceRecord:
        user_id = data.user_id or actor.id
        enforce(actor, Action.create, Resource.attendance, user_id)
        owner = await get_user(db, user_id)

        check_in = as_utc(data.check_in) if data.check_in else datetime.now(timezone.utc)
        day = data.date or check_in.date()

        if data.check_out is not None:
            check_out = as_utc(data.check_out)
            status = await AttendanceService._derive_status(db, check_in, check_out)
        else:
            check_out = None
            status = data.status or AttendanceStatus.present

        existing = await db.execute(
            select(AttendanceRecord.id).where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date == day,
            )
        )
        if existing.first() is not None:
            logger.warning("Duplicate attendance for user %s on %s", user_id, day)
            raise _duplicate(user_id, day)

        record = AttendanceRecord(
            user=owner,
            date=day,
            status=status,
            check_in=check_in,
            check_out=check_out,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise _duplicate(user_id, day) from exc

        await create_audit_entry(
            db,
            action="create",
            entity_type="attendance",
            entity_id=record.id,
            actor_id=actor.id,
            new_values={
                "user_id": user_id,
                "date": day.isoformat(),
                "status": status.value,
            },
        )
        logger.info("Attendance %s marked for user %s on %s: %s", record.id, user_id, day, status.value)
        return record

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_attendance(
        db: AsyncSession,
        actor: Actor,
        attendance_id: int,
        data: AttendanceUpdate,
    ) -> AttendanceRecord:
        """Check out (status derived) or, without a check-out, override the status."""
        record = await AttendanceService._get_record(db, attendance_id)
        enforce(actor, Action.update, Resource.attendance, record.user_id)

        old_status = record.status

        if data.check_out is not None:
            if record.check_out is not None:
                raise ConflictError(
                    "check_out",
                    record.check_out.isoformat(),
                    detail=f"Attendance {record.id} is already checked out.",
                )
            check_out = as_utc(data.check_out)
            if record.check_in is not None:
                record.status = await AttendanceService._derive_status(
                    db, record.check_in, check_out,
                )
            record.check_out = check_out
            action = "check_out"
        elif data.status is not None:
            enforce(actor, Action.override, Resource.attendance, record.user_id)
            record.status = data.status
            action = "override"
        else:
            raise InvalidInputException(
                {"body": ["Provide check_out or status."]}
            )

        await db.flush()

        await create_audit_entry(
            db,
            action=action,
            entity_type="attendance",
            entity_id=record.id,
            actor_id=actor.id,
            old_values={"status": old_status.value},
            new_values={"status": record.status.value},
        )
        logger.info(
            "Attendance %s %s by user %s: %s -> %s",
            record.id, action, actor.id, old_status.value, record.status.value,
        )
        return record
