"""Payroll service layer."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.service import get_user
from hrops.common.audit import create_audit_entry
from hrops.common.constants import Action, PayrollStatus, Resource
from hrops.common.exceptions import ConflictError, NotFoundException
from hrops.common.pagination import PaginatedResponse, PaginationParams, paginate
from hrops.payroll.models import PayrollRecord
from hrops.payroll.schemas import PayrollCreate
from hrops.rules.access import Actor, enforce
from hrops.rules.transitions import ensure_payroll_transition

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("id", "user_id", "month", "amount", "status", "created_at")


def _duplicate(user_id: int, month: str) -> ConflictError:
    return ConflictError(
        "month",
        month,
        detail=f"A payroll record for user {user_id} and month '{month}' already exists.",
    )


class PayrollService:
    """Static service class for payroll operations."""

    @staticmethod
    async def list_payroll(
        db: AsyncSession,
        actor: Actor,
        params: PaginationParams,
        *,
        user_id: Optional[int] = None,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> PaginatedResponse:
        decision = enforce(actor, Action.read, Resource.payroll, user_id)

        stmt = select(PayrollRecord).order_by(
            PayrollRecord.month.desc(), PayrollRecord.id.desc()
        )
        if decision.scope_filter is not None:
            stmt = stmt.where(PayrollRecord.user_id == decision.scope_filter)
        if month:
            stmt = stmt.where(PayrollRecord.month == month)
        if status is not None:
            stmt = stmt.where(PayrollRecord.status == status)
        return await paginate(
            db, stmt, params, model=PayrollRecord, sortable=SORTABLE_FIELDS,
        )

    @staticmethod
    async def create_payroll(
        db: AsyncSession,
        actor: Actor,
        data: PayrollCreate,
    ) -> PayrollRecord:
        enforce(actor, Action.create, Resource.payroll, data.user_id)
        owner = await get_user(db, data.user_id)

        existing = await db.execute(
            select(PayrollRecord.id).where(
                PayrollRecord.user_id == data.user_id,
                PayrollRecord.month == data.month,
            )
        )
        if existing.first() is not None:
            logger.warning("Duplicate payroll for user %s, month %s", data.user_id, data.month)
            raise _duplicate(data.user_id, data.month)

        record = PayrollRecord(
            user=owner,
            month=data.month,
            amount=data.amount,
            status=data.status,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise _duplicate(data.user_id, data.month) from exc

        await create_audit_entry(
            db,
            action="create",
            entity_type="payroll",
            entity_id=record.id,
            actor_id=actor.id,
            new_values={
                "user_id": data.user_id,
                "month": data.month,
                "amount": str(data.amount),
                "status": data.status.value,
            },
        )
        logger.info(
            "Payroll %s created for user %s (%s, %s)",
            record.id, data.user_id, data.month, data.status.value,
        )
        return record

    @staticmethod
    async def update_status(
        db: AsyncSession,
        actor: Actor,
        payroll_id: int,
        requested: PayrollStatus,
    ) -> PayrollRecord:
        """Advance a record along Pending → Processing → Paid."""
        enforce(actor, Action.update_status, Resource.payroll)

        result = await db.execute(
            select(PayrollRecord).where(PayrollRecord.id == payroll_id)
        )
        record = result.scalars().first()
        if record is None:
            raise NotFoundException("Payroll", payroll_id)

        current = record.status
        ensure_payroll_transition(current, requested)

        record.status = requested
        await db.flush()

        await create_audit_entry(
            db,
            action="update_status",
            entity_type="payroll",
            entity_id=record.id,
            actor_id=actor.id,
            old_values={"status": current.value},
            new_values={"status": requested.value},
        )
        logger.info(
            "Payroll %s status %s -> %s by user %s",
            record.id, current.value, requested.value, actor.id,
        )
        return record
