"""Attendance status from worked hours.

Bands (lower bound inclusive):
    worked >= full_day_hours               → Present
    half_day_min_hours <= worked < full    → Half Day
    worked < half_day_min_hours            → Absent

A record with no check-out yet counts as Present.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from hrops.common.constants import AttendanceStatus
from hrops.common.exceptions import InvalidIntervalException

DEFAULT_FULL_DAY_HOURS = 8.0
DEFAULT_HALF_DAY_MIN_HOURS = 4.0


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def worked_hours(check_in: datetime, check_out: datetime) -> float:
    """Elapsed hours between check-in and check-out.

    Raises ``InvalidIntervalException`` when check-out precedes check-in.
    """
    seconds = (as_utc(check_out) - as_utc(check_in)).total_seconds()
    if seconds < 0:
        raise InvalidIntervalException(
            f"check_out ({check_out.isoformat()}) precedes check_in ({check_in.isoformat()})."
        )
    return seconds / 3600


def compute_status(
    check_in: datetime,
    check_out: Optional[datetime],
    full_day_hours: float = DEFAULT_FULL_DAY_HOURS,
    half_day_min_hours: float = DEFAULT_HALF_DAY_MIN_HOURS,
) -> AttendanceStatus:
    if check_out is None:
        return AttendanceStatus.present

    hours = worked_hours(check_in, check_out)
    if hours >= full_day_hours:
        return AttendanceStatus.present
    if hours >= half_day_min_hours:
        return AttendanceStatus.half_day
    return AttendanceStatus.absent
