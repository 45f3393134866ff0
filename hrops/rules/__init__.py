"""Business rules shared by the request handlers.

Each module is a pure evaluator: access decisions, attendance status,
leave-interval overlap, and leave / payroll status transitions.
"""

from hrops.rules.access import AccessDecision, Actor, authorize, enforce
from hrops.rules.attendance_status import compute_status, worked_hours
from hrops.rules.leave_overlap import DateInterval, has_overlap, validate_interval
from hrops.rules.transitions import (
    can_transition_leave,
    can_transition_payroll,
    ensure_leave_transition,
    ensure_payroll_transition,
)

__all__ = [
    "AccessDecision",
    "Actor",
    "authorize",
    "enforce",
    "compute_status",
    "worked_hours",
    "DateInterval",
    "has_overlap",
    "validate_interval",
    "can_transition_leave",
    "can_transition_payroll",
    "ensure_leave_transition",
    "ensure_payroll_transition",
]
