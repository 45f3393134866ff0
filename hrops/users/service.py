"""User service — listing, creation and role changes under the access policy."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrops.auth.service import get_user, get_user_by_email, hash_password
from hrops.common.audit import create_audit_entry
from hrops.common.constants import Action, PredefinedRole, Resource
from hrops.common.exceptions import ConflictError
from hrops.common.pagination import PaginatedResponse, PaginationParams, paginate
from hrops.rules.access import Actor, enforce
from hrops.users.models import User
from hrops.users.schemas import UserCreate

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("id", "name", "email", "role", "department", "created_at")


class UserService:
    """Async user operations."""

    @staticmethod
    async def list_users(
        db: AsyncSession,
        actor: Actor,
        params: PaginationParams,
        *,
        department: Optional[str] = None,
    ) -> PaginatedResponse:
        """Employees see only themselves; privileged roles see everyone."""
        decision = enforce(actor, Action.read, Resource.user)

        stmt = select(User).order_by(User.id.asc())
        if decision.scope_filter is not None:
            stmt = stmt.where(User.id == decision.scope_filter)
        if department:
            stmt = stmt.where(User.department == department)
        return await paginate(db, stmt, params, model=User, sortable=SORTABLE_FIELDS)

    @staticmethod
    async def create_user(db: AsyncSession, actor: Actor, data: UserCreate) -> User:
        enforce(actor, Action.create, Resource.user, target_role=data.role)

        if await get_user_by_email(db, data.email) is not None:
            logger.warning("User create rejected, email %s already registered", data.email)
            raise ConflictError("email", data.email)

        user = User(
            name=data.name,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            role=data.role.value,
            department=data.department,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError("email", data.email) from exc

        await create_audit_entry(
            db,
            action="create",
            entity_type="user",
            entity_id=user.id,
            actor_id=actor.id,
            new_values={"email": user.email, "role": user.role},
        )
        logger.info("User %s created user %s with role %s", actor.id, user.id, user.role)
        return user

    @staticmethod
    async def change_role(
        db: AsyncSession,
        actor: Actor,
        user_id: int,
        role: PredefinedRole,
    ) -> User:
        """Admin-only role change; an Admin cannot demote themselves."""
        enforce(actor, Action.change_role, Resource.user, user_id, target_role=role)

        user = await get_user(db, user_id)
        old_role = user.role
        user.role = role.value
        await db.flush()

        await create_audit_entry(
            db,
            action="change_role",
            entity_type="user",
            entity_id=user.id,
            actor_id=actor.id,
            old_values={"role": old_role},
            new_values={"role": user.role},
        )
        logger.info("User %s changed role of %s: %s -> %s", actor.id, user.id, old_role, user.role)
        return user
