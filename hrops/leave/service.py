"""Leave service layer — apply, list, approve / reject.

Business logic:
  - from_date <= to_date, closed interval
  - A new request may not intersect any of the same user's Pending or
    Approved requests; Rejected ones never block
  - The owner's user row is locked while the overlap check runs, so two
    concurrent applications for one user are serialised
  - Only a Pending request may be reviewed; Approved / Rejected are final
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.common.audit import create_audit_entry
from hrops.common.constants import Action, LeaveStatus, Resource
from hrops.common.exceptions import NotFoundException, OverlapConflictError
from hrops.common.pagination import PaginatedResponse, PaginationParams, paginate
from hrops.leave.models import LeaveRequest
from hrops.leave.schemas import LeaveCreate
from hrops.rules.access import Actor, enforce
from hrops.rules.leave_overlap import DateInterval, has_overlap, validate_interval
from hrops.rules.transitions import ensure_leave_transition
from hrops.users.models import User

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("id", "user_id", "from_date", "to_date", "status", "created_at")

_BLOCKING_STATUSES = (LeaveStatus.pending, LeaveStatus.approved)


class LeaveService:
    """Async leave operations."""

    @staticmethod
    async def _lock_owner(db: AsyncSession, user_id: int) -> User:
        result = await db.execute(
            select(User).where(User.id == user_id).with_for_update()
        )
        user = result.scalars().first()
        if user is None:
            raise NotFoundException("User", user_id)
        return user

    @staticmethod
    async def _blocking_intervals(
        db: AsyncSession,
        user_id: int,
        candidate: DateInterval,
    ) -> list[DateInterval]:
        """Same-user Pending / Approved intervals that could touch *candidate*."""
        result = await db.execute(
            select(LeaveRequest.from_date, LeaveRequest.to_date).where(
                LeaveRequest.user_id == user_id,
                LeaveRequest.status.in_(_BLOCKING_STATUSES),
                LeaveRequest.from_date <= candidate.end,
                LeaveRequest.to_date >= candidate.start,
            )
        )
        return [DateInterval(start, end) for start, end in result.all()]

    # ═══════════════════════════════════════════════════════════════
    # Apply
    # ═══════════════════════════════════════════════════════════════

    @staticmethod
    async def create_leave(
        db: AsyncSession,
        actor: Actor,
        data: LeaveCreate,
    ) -> LeaveRequest:
        user_id = data.user_id or actor.id
        enforce(actor, Action.create, Resource.leave, user_id)

        candidate = validate_interval(data.from_date, data.to_date)

        status = data.status or LeaveStatus.pending
        if status is not LeaveStatus.pending:
            # Filing a pre-decided request is a review in disguise.
            enforce(actor, Action.review, Resource.leave, user_id)

        owner = await LeaveService._lock_owner(db, user_id)

        existing = await LeaveService._blocking_intervals(db, user_id, candidate)
        if status is not LeaveStatus.rejected and has_overlap(candidate, existing):
            logger.warning(
                "Leave for user %s over %s..%s overlaps an existing request",
                user_id, candidate.start, candidate.end,
            )
            raise OverlapConflictError(candidate.start.isoformat(), candidate.end.isoformat())

        leave = LeaveRequest(
            user=owner,
            reason=data.reason,
            from_date=candidate.start,
            to_date=candidate.end,
            status=status,
        )
        db.add(leave)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise OverlapConflictError(
                candidate.start.isoformat(), candidate.end.isoformat()
            ) from exc

        await create_audit_entry(
            db,
            action="create",
            entity_type="leave_request",
            entity_id=leave.id,
            actor_id=actor.id,
            new_values={
                "user_id": user_id,
                "from_date": candidate.start.isoformat(),
                "to_date": candidate.end.isoformat(),
                "status": status.value,
            },
        )
        logger.info(
            "Leave %s filed for user %s (%s..%s, %s)",
            leave.id, user_id, candidate.start, candidate.end, status.value,
        )
        return leave

    # ═══════════════════════════════════════════════════════════════
    # List
    # ═══════════════════════════════════════════════════════════════

    @staticmethod
    async def list_leaves(
        db: AsyncSession,
        actor: Actor,
        params: PaginationParams,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> PaginatedResponse:
        decision = enforce(actor, Action.read, Resource.leave, user_id)

        stmt = select(LeaveRequest).order_by(
            LeaveRequest.created_at.desc(), LeaveRequest.id.desc()
        )
        if decision.scope_filter is not None:
            stmt = stmt.where(LeaveRequest.user_id == decision.scope_filter)
        if status is not None:
            stmt = stmt.where(LeaveRequest.status == status)
        if from_date is not None:
            stmt = stmt.where(LeaveRequest.to_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(LeaveRequest.from_date <= to_date)
        return await paginate(
            db, stmt, params, model=LeaveRequest, sortable=SORTABLE_FIELDS,
        )

    # ═══════════════════════════════════════════════════════════════
    # Review
    # ═══════════════════════════════════════════════════════════════

    @staticmethod
    async def review_leave(
        db: AsyncSession,
        actor: Actor,
        leave_id: int,
        requested: LeaveStatus,
    ) -> LeaveRequest:
        """Approve or reject a Pending request."""
        enforce(actor, Action.review, Resource.leave)

        result = await db.execute(
            select(LeaveRequest).where(LeaveRequest.id == leave_id)
        )
        leave = result.scalars().first()
        if leave is None:
            raise NotFoundException("LeaveRequest", leave_id)

        current = leave.status
        ensure_leave_transition(current, requested)

        leave.status = requested
        await db.flush()

        await create_audit_entry(
            db,
            action="approve" if requested is LeaveStatus.approved else "reject",
            entity_type="leave_request",
            entity_id=leave.id,
            actor_id=actor.id,
            old_values={"status": current.value},
            new_values={"status": requested.value},
        )
        logger.info(
            "Leave %s %s by user %s", leave.id, requested.value.lower(), actor.id,
        )
        return leave
