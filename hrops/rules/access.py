"""Access policy — who may read or write which records.

``authorize`` is a pure decision function over an already-authenticated
actor. It never raises; callers turn a denial into ``ForbiddenException``
via :func:`enforce`.

Rules, in precedence order:

1. Employee on attendance / leave / payroll: reads are scoped to the
   actor's own id; writes are allowed only for the actor's own records
   and only where employees may write at all (attendance create/update,
   leave create).
2. Manager, Admin, HR Officer, Payroll Officer reading users /
   attendance / leave / payroll: unrestricted, optionally filtered by a
   caller-supplied user id.
3. Creating payroll: Manager, Admin, Payroll Officer.
4. Reviewing (approve / reject) leave: Admin, Manager, HR Officer.
5. Updating payroll status: Admin, Manager, Payroll Officer.
6. Creating users: Admin, Manager, HR Officer; creating an Admin needs
   an Admin actor.
7. Changing roles: Admin only, and never demoting oneself.
8. Everything else is denied, including every custom role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from hrops.common.constants import (
    ATTENDANCE_OVERRIDERS,
    LEAVE_REVIEWERS,
    PAYROLL_WRITERS,
    PRIVILEGED_ROLES,
    SELF_SERVICE_RESOURCES,
    SETTINGS_EDITORS,
    USER_CREATORS,
    Action,
    CustomRole,
    PredefinedRole,
    Resource,
    Role,
)
from hrops.common.exceptions import ForbiddenException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    id: int
    email: str
    role: Role


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization check.

    ``scope_filter`` is the owner id reads must be restricted to, or
    ``None`` for an unrestricted read.
    """

    allow: bool
    scope_filter: Optional[int] = None
    reason: str = ""


def _deny(reason: str) -> AccessDecision:
    return AccessDecision(allow=False, reason=reason)


def _allow(scope_filter: Optional[int] = None) -> AccessDecision:
    return AccessDecision(allow=True, scope_filter=scope_filter)


# Writes an employee may make on their own records.
_EMPLOYEE_SELF_WRITES: frozenset[tuple[Resource, Action]] = frozenset({
    (Resource.attendance, Action.create),
    (Resource.attendance, Action.update),
    (Resource.leave, Action.create),
})

# Writes any privileged role may make on anyone's records.
_PRIVILEGED_WRITES: frozenset[tuple[Resource, Action]] = frozenset({
    (Resource.attendance, Action.create),
    (Resource.attendance, Action.update),
    (Resource.leave, Action.create),
})


def authorize(
    actor: Actor,
    action: Action,
    resource: Resource,
    target_user_id: Optional[int] = None,
    *,
    target_role: Optional[Role] = None,
) -> AccessDecision:
    """Decide whether *actor* may perform *action* on *resource*.

    *target_user_id* is the owner of the record being written, or the
    caller-supplied filter for a read. *target_role* is the role being
    assigned when creating a user or changing a role.
    """
    role = actor.role

    if isinstance(role, CustomRole):
        return _deny(f"Role '{role.name}' has no permissions.")

    # ── Rule 1: employee self-service ───────────────────────────────
    if role is PredefinedRole.employee:
        if resource in SELF_SERVICE_RESOURCES:
            if action is Action.read:
                return _allow(scope_filter=actor.id)
            if (resource, action) in _EMPLOYEE_SELF_WRITES:
                if target_user_id is None or target_user_id == actor.id:
                    return _allow(scope_filter=actor.id)
                return _deny("Employees may only act on their own records.")
        if resource is Resource.user and action is Action.read:
            return _allow(scope_filter=actor.id)
        if resource is Resource.settings and action is Action.read:
            return _allow()

    # ── Rule 2: privileged reads ────────────────────────────────────
    if role in PRIVILEGED_ROLES and action is Action.read:
        if resource in SELF_SERVICE_RESOURCES or resource in (Resource.user, Resource.settings):
            return _allow(scope_filter=target_user_id)

    if role in PRIVILEGED_ROLES and (resource, action) in _PRIVILEGED_WRITES:
        return _allow()

    # ── Rule 3: payroll creation ────────────────────────────────────
    if resource is Resource.payroll and action is Action.create:
        if role in PAYROLL_WRITERS:
            return _allow()
        return _deny("Only Manager, Admin or Payroll Officer can create payroll records.")

    # ── Rule 4: leave review ────────────────────────────────────────
    if resource is Resource.leave and action is Action.review:
        if role in LEAVE_REVIEWERS:
            return _allow()
        return _deny("Only Admin, Manager or HR Officer can approve or reject leave.")

    # ── Rule 5: payroll status ──────────────────────────────────────
    if resource is Resource.payroll and action is Action.update_status:
        if role in PAYROLL_WRITERS:
            return _allow()
        return _deny("Only Admin, Manager or Payroll Officer can update payroll status.")

    # ── Rule 6: user creation ───────────────────────────────────────
    if resource is Resource.user and action is Action.create:
        if role not in USER_CREATORS:
            return _deny("Only Admin, Manager or HR Officer can create users.")
        if target_role is PredefinedRole.admin and role is not PredefinedRole.admin:
            return _deny("Only an Admin can create another Admin.")
        return _allow()

    # ── Rule 7: role change ─────────────────────────────────────────
    if resource is Resource.user and action is Action.change_role:
        if role is not PredefinedRole.admin:
            return _deny("Only an Admin can change roles.")
        if target_user_id == actor.id and target_role is not PredefinedRole.admin:
            return _deny("You cannot remove your own Admin role.")
        return _allow()

    # Manual attendance status and settings edits.
    if resource is Resource.attendance and action is Action.override:
        if role in ATTENDANCE_OVERRIDERS:
            return _allow()
        return _deny("Only Admin, Manager or HR Officer can set attendance status manually.")

    if resource is Resource.settings and action is Action.update:
        if role in SETTINGS_EDITORS:
            return _allow()
        return _deny("Only Admin or HR Officer can change settings.")

    # ── Rule 8: default deny ────────────────────────────────────────
    return _deny(
        f"Role '{role.value}' may not {action.value} {resource.value} records."
    )


def enforce(
    actor: Actor,
    action: Action,
    resource: Resource,
    target_user_id: Optional[int] = None,
    *,
    target_role: Optional[Role] = None,
) -> AccessDecision:
    """Like :func:`authorize` but raise ``ForbiddenException`` on denial."""
    decision = authorize(
        actor, action, resource, target_user_id, target_role=target_role,
    )
    if not decision.allow:
        logger.warning(
            "Denied user %s (%s) %s on %s: %s",
            actor.id, actor.role.value, action.value, resource.value, decision.reason,
        )
        raise ForbiddenException(detail=decision.reason)
    return decision
