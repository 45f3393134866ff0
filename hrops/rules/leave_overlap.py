"""Closed-interval overlap test for leave requests."""

from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple

from hrops.common.exceptions import InvalidIntervalException


class DateInterval(NamedTuple):
    start: date
    end: date


def validate_interval(start: date, end: date) -> DateInterval:
    """Return the interval, or raise if *end* precedes *start*."""
    if end < start:
        raise InvalidIntervalException(
            f"Leave end date {end.isoformat()} precedes start date {start.isoformat()}."
        )
    return DateInterval(start, end)


def intervals_overlap(a: DateInterval, b: DateInterval) -> bool:
    # Closed intervals: a shared boundary day counts as overlap.
    return a.start <= b.end and b.start <= a.end


def has_overlap(candidate: DateInterval, existing: Iterable[DateInterval]) -> bool:
    """True if *candidate* intersects any interval in *existing*.

    The caller passes only the same user's requests, already filtered by
    whichever statuses should block.
    """
    return any(intervals_overlap(candidate, other) for other in existing)
