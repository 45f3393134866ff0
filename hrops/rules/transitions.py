"""Status state machines for leave requests and payroll records.

Leave:    Pending → Approved | Rejected; both terminal.
Payroll:  Pending ⇄ Processing → Paid, except Processing → Pending;
          Paid is terminal. Same-state requests are accepted as no-ops.

Attendance deliberately has no state machine: a privileged actor may
set any status by hand.
"""

from __future__ import annotations

from dataclasses import dataclass

from hrops.common.constants import LeaveStatus, PayrollStatus
from hrops.common.exceptions import AlreadyProcessedError, InvalidInputException

_LEAVE_DECISIONS = frozenset({LeaveStatus.approved, LeaveStatus.rejected})


@dataclass(frozen=True)
class TransitionCheck:
    allowed: bool
    reason: str = ""


# ── Leave ───────────────────────────────────────────────────────────

def check_leave_transition(current: LeaveStatus, requested: LeaveStatus) -> TransitionCheck:
    if current is not LeaveStatus.pending:
        return TransitionCheck(False, f"AlreadyProcessed: {current.value}")
    if requested not in _LEAVE_DECISIONS:
        return TransitionCheck(
            False, f"A pending leave can only become Approved or Rejected, not {requested.value}."
        )
    return TransitionCheck(True)


def can_transition_leave(current: LeaveStatus, requested: LeaveStatus) -> bool:
    return check_leave_transition(current, requested).allowed


def ensure_leave_transition(current: LeaveStatus, requested: LeaveStatus) -> None:
    """Raise unless *current* → *requested* is a legal leave transition."""
    check = check_leave_transition(current, requested)
    if check.allowed:
        return
    if current is not LeaveStatus.pending:
        raise AlreadyProcessedError(current.value, check.reason)
    raise InvalidInputException({"status": [check.reason]})


# ── Payroll ─────────────────────────────────────────────────────────

def check_payroll_transition(current: PayrollStatus, requested: PayrollStatus) -> TransitionCheck:
    if current is PayrollStatus.paid:
        return TransitionCheck(False, "payroll already paid")
    if current is PayrollStatus.processing and requested is PayrollStatus.pending:
        return TransitionCheck(False, "cannot regress from Processing to Pending")
    return TransitionCheck(True)


def can_transition_payroll(current: PayrollStatus, requested: PayrollStatus) -> bool:
    return check_payroll_transition(current, requested).allowed


def ensure_payroll_transition(current: PayrollStatus, requested: PayrollStatus) -> None:
    """Raise ``AlreadyProcessedError`` unless the payroll transition is legal."""
    check = check_payroll_transition(current, requested)
    if not check.allowed:
        raise AlreadyProcessedError(current.value, check.reason)
