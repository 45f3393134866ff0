"""Enums and constants for HR Ops. Enum values travel on the wire as-is."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


# ── Roles ───────────────────────────────────────────────────────────

class PredefinedRole(str, enum.Enum):
    employee = "Employee"
    manager = "Manager"
    admin = "Admin"
    hr_officer = "HR Officer"
    payroll_officer = "Payroll Officer"


@dataclass(frozen=True)
class CustomRole:
    """A free-text role string that matches none of the predefined roles."""

    name: str

    @property
    def value(self) -> str:
        return self.name


Role = Union[PredefinedRole, CustomRole]


def parse_role(value: str) -> Role:
    """Map a stored role string onto the predefined enum, else a CustomRole."""
    try:
        return PredefinedRole(value)
    except ValueError:
        return CustomRole(value)


# ── Attendance / Leave / Payroll ────────────────────────────────────

class AttendanceStatus(str, enum.Enum):
    present = "Present"
    absent = "Absent"
    half_day = "Half Day"
    leave = "Leave"


class LeaveStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


class PayrollStatus(str, enum.Enum):
    pending = "Pending"
    processing = "Processing"
    paid = "Paid"


# ── Authorization vocabulary ────────────────────────────────────────

class Resource(str, enum.Enum):
    user = "user"
    attendance = "attendance"
    leave = "leave"
    payroll = "payroll"
    settings = "settings"


class Action(str, enum.Enum):
    read = "read"
    create = "create"
    update = "update"
    override = "override"          # manual attendance status edit
    review = "review"              # approve / reject a leave request
    update_status = "update_status"
    change_role = "change_role"


# ── Role sets ───────────────────────────────────────────────────────

PRIVILEGED_ROLES: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.manager,
    PredefinedRole.admin,
    PredefinedRole.hr_officer,
    PredefinedRole.payroll_officer,
})
PAYROLL_WRITERS: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.manager,
    PredefinedRole.admin,
    PredefinedRole.payroll_officer,
})
LEAVE_REVIEWERS: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.admin,
    PredefinedRole.manager,
    PredefinedRole.hr_officer,
})
USER_CREATORS: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.admin,
    PredefinedRole.manager,
    PredefinedRole.hr_officer,
})
ATTENDANCE_OVERRIDERS: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.admin,
    PredefinedRole.manager,
    PredefinedRole.hr_officer,
})
SETTINGS_EDITORS: frozenset[PredefinedRole] = frozenset({
    PredefinedRole.admin,
    PredefinedRole.hr_officer,
})
SELF_SERVICE_RESOURCES: frozenset[Resource] = frozenset({
    Resource.attendance,
    Resource.leave,
    Resource.payroll,
})

# ── Misc constants ──────────────────────────────────────────────────

ATTENDANCE_SETTINGS_KEY = "attendance"
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50
