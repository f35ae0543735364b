"""Conflict checking for proposed stays."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from shared.domain.value_objects import DateRange, as_date
from apps.bookings.domain.calendar import AvailabilityCalendar
from apps.bookings.domain.errors import InvalidRange, PastDate


@dataclass(frozen=True)
class Available:
    @property
    def is_available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """The stay collides with a confirmed booking starting at ``first_conflicting_date``"""
    first_conflicting_date: date
    booking_id: UUID | None = None

    @property
    def is_available(self) -> bool:
        return False


AvailabilityResult = Available | Unavailable


def validate_range(
    check_in: date | datetime,
    check_out: date | datetime,
    today: date,
    allow_past: bool = False,
) -> DateRange:
    """
    Check the calendar-independent preconditions of a stay.

    Raises:
        InvalidRange: check-out is not after check-in.
        PastDate: check-in precedes today and ``allow_past`` is off.
    """
    check_in, check_out = as_date(check_in), as_date(check_out)
    if check_out <= check_in:
        raise InvalidRange(check_in, check_out)
    if not allow_past and check_in < today:
        raise PastDate(check_in, today)
    return DateRange(check_in, check_out)


def check_interval(calendar: AvailabilityCalendar, dates: DateRange) -> AvailabilityResult:
    """Available iff every night of ``dates`` is free in ``calendar``."""
    if not calendar.covers(dates):
        raise ValueError(f"Calendar {calendar.start} - {calendar.end} does not cover {dates}")
    conflict = calendar.first_unavailable(dates)
    if conflict is None:
        return Available()
    return Unavailable(conflict.day, conflict.booking_id)


def check_request(
    calendar: AvailabilityCalendar,
    check_in: date | datetime,
    check_out: date | datetime,
    today: date,
    allow_past: bool = False,
) -> AvailabilityResult:
    dates = validate_range(check_in, check_out, today, allow_past=allow_past)
    return check_interval(calendar, dates)
