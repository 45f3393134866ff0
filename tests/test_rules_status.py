"""Attendance status calculator and leave / payroll transition guards."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from hrops.common.constants import AttendanceStatus, LeaveStatus, PayrollStatus
from hrops.common.exceptions import (
    AlreadyProcessedError,
    InvalidInputException,
    InvalidIntervalException,
)
from hrops.rules.attendance_status import compute_status, worked_hours
from hrops.rules.leave_overlap import (
    DateInterval,
    has_overlap,
    intervals_overlap,
    validate_interval,
)
from hrops.rules.transitions import (
    can_transition_leave,
    can_transition_payroll,
    ensure_leave_transition,
    ensure_payroll_transition,
)

CHECK_IN = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


def _after(hours: float) -> datetime:
    return CHECK_IN + timedelta(hours=hours)


# ═════════════════════════════════════════════════════════════════════
# Attendance status
# ═════════════════════════════════════════════════════════════════════


class TestComputeStatus:

    def test_full_day_boundary_is_present(self):
        assert compute_status(CHECK_IN, _after(8)) is AttendanceStatus.present

    def test_just_under_full_day_is_half_day(self):
        assert compute_status(CHECK_IN, _after(7.99)) is AttendanceStatus.half_day

    def test_half_day_boundary_is_half_day(self):
        assert compute_status(CHECK_IN, _after(4)) is AttendanceStatus.half_day

    def test_just_under_half_day_is_absent(self):
        assert compute_status(CHECK_IN, _after(3.99)) is AttendanceStatus.absent

    def test_zero_hours_is_absent(self):
        assert compute_status(CHECK_IN, CHECK_IN) is AttendanceStatus.absent

    def test_no_check_out_is_present(self):
        assert compute_status(CHECK_IN, None) is AttendanceStatus.present

    def test_check_out_before_check_in_rejected(self):
        with pytest.raises(InvalidIntervalException):
            compute_status(CHECK_IN, _after(-1))

    def test_custom_thresholds(self):
        status = compute_status(CHECK_IN, _after(6), full_day_hours=6, half_day_min_hours=3)
        assert status is AttendanceStatus.present
        status = compute_status(CHECK_IN, _after(2.5), full_day_hours=6, half_day_min_hours=3)
        assert status is AttendanceStatus.absent

    def test_naive_and_aware_timestamps_mix(self):
        """Naive values are read as UTC."""
        naive_out = datetime(2025, 1, 6, 17, 30)
        assert worked_hours(CHECK_IN, naive_out) == pytest.approx(8.5)

    def test_offset_timestamps_normalised(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        check_out = datetime(2025, 1, 6, 18, 30, tzinfo=ist)  # 13:00 UTC
        assert worked_hours(CHECK_IN, check_out) == pytest.approx(4.0)


# ═════════════════════════════════════════════════════════════════════
# Leave overlap
# ═════════════════════════════════════════════════════════════════════


class TestLeaveOverlap:

    EXISTING = DateInterval(date(2025, 1, 10), date(2025, 1, 15))

    def test_shared_boundary_day_overlaps(self):
        candidate = DateInterval(date(2025, 1, 15), date(2025, 1, 20))
        assert has_overlap(candidate, [self.EXISTING])

    def test_next_day_does_not_overlap(self):
        candidate = DateInterval(date(2025, 1, 16), date(2025, 1, 20))
        assert not has_overlap(candidate, [self.EXISTING])

    def test_overlap_is_symmetric(self):
        others = [
            DateInterval(date(2025, 1, 1), date(2025, 1, 9)),
            DateInterval(date(2025, 1, 1), date(2025, 1, 10)),
            DateInterval(date(2025, 1, 12), date(2025, 1, 13)),
            DateInterval(date(2025, 1, 5), date(2025, 1, 30)),
            DateInterval(date(2025, 1, 16), date(2025, 1, 16)),
        ]
        for other in others:
            assert intervals_overlap(self.EXISTING, other) == intervals_overlap(other, self.EXISTING)

    def test_interval_overlaps_itself(self):
        single = DateInterval(date(2025, 3, 1), date(2025, 3, 1))
        assert intervals_overlap(single, single)
        assert intervals_overlap(self.EXISTING, self.EXISTING)

    def test_no_existing_requests(self):
        assert not has_overlap(self.EXISTING, [])

    def test_reversed_interval_rejected(self):
        with pytest.raises(InvalidIntervalException):
            validate_interval(date(2025, 1, 20), date(2025, 1, 10))

    def test_single_day_interval_valid(self):
        assert validate_interval(date(2025, 1, 10), date(2025, 1, 10)).start == date(2025, 1, 10)


# ═════════════════════════════════════════════════════════════════════
# Transitions
# ═════════════════════════════════════════════════════════════════════


class TestLeaveTransitions:

    def test_pending_to_decision(self):
        assert can_transition_leave(LeaveStatus.pending, LeaveStatus.approved)
        assert can_transition_leave(LeaveStatus.pending, LeaveStatus.rejected)

    def test_pending_to_pending_rejected(self):
        assert not can_transition_leave(LeaveStatus.pending, LeaveStatus.pending)
        with pytest.raises(InvalidInputException):
            ensure_leave_transition(LeaveStatus.pending, LeaveStatus.pending)

    def test_decided_leave_is_terminal(self):
        for current in (LeaveStatus.approved, LeaveStatus.rejected):
            for requested in LeaveStatus:
                assert not can_transition_leave(current, requested)

    def test_already_processed_names_current_status(self):
        with pytest.raises(AlreadyProcessedError) as exc_info:
            ensure_leave_transition(LeaveStatus.approved, LeaveStatus.rejected)
        assert exc_info.value.detail == "AlreadyProcessed: Approved"
        assert exc_info.value.status_code == 409


class TestPayrollTransitions:

    def test_forward_moves_allowed(self):
        assert can_transition_payroll(PayrollStatus.pending, PayrollStatus.processing)
        assert can_transition_payroll(PayrollStatus.pending, PayrollStatus.paid)
        assert can_transition_payroll(PayrollStatus.processing, PayrollStatus.paid)

    def test_same_state_is_a_no_op(self):
        assert can_transition_payroll(PayrollStatus.pending, PayrollStatus.pending)
        assert can_transition_payroll(PayrollStatus.processing, PayrollStatus.processing)

    def test_processing_cannot_regress(self):
        assert not can_transition_payroll(PayrollStatus.processing, PayrollStatus.pending)
        with pytest.raises(AlreadyProcessedError, match="cannot regress"):
            ensure_payroll_transition(PayrollStatus.processing, PayrollStatus.pending)

    def test_paid_is_terminal(self):
        for requested in PayrollStatus:
            assert not can_transition_payroll(PayrollStatus.paid, requested)
        with pytest.raises(AlreadyProcessedError, match="payroll already paid"):
            ensure_payroll_transition(PayrollStatus.paid, PayrollStatus.paid)
