"""
Availability Calendar

Per-day availability map of a single room over a bounded horizon.

Only CONFIRMED bookings occupy nights. A booking occupies every night in
[check_in, check_out); the check-out day itself stays free so a new guest
can arrive the same day. The calendar is derived data: it is rebuilt from
the authoritative booking list for every decision and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List
from uuid import UUID

from shared.domain.value_objects import DateRange, as_date

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.entities import Booking

DEFAULT_HORIZON_DAYS = 90


@dataclass(frozen=True)
class CalendarDay:
    """Availability of one night"""
    day: date
    available: bool = True
    booking_id: UUID | None = None


class AvailabilityCalendar:
    """
    Availability map for [start, start + horizon_days)

    Every date in the horizon is present. Overlapping confirmed bookings
    do not raise; the booking marked last owns the night.
    """

    def __init__(self, room_id, start: date | datetime, horizon_days: int = DEFAULT_HORIZON_DAYS):
        if horizon_days < 1:
            raise ValueError("Horizon must span at least one day")
        self.room_id = room_id
        self.start = as_date(start)
        self.horizon_days = horizon_days
        self._days: Dict[date, CalendarDay] = {
            self.start + timedelta(days=offset): CalendarDay(self.start + timedelta(days=offset))
            for offset in range(horizon_days)
        }

    @classmethod
    def build(
        cls,
        room_id,
        bookings: Iterable['Booking'],
        start: date | datetime,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> 'AvailabilityCalendar':
        """Build the calendar from a room's bookings; non-blocking ones are skipped."""
        calendar = cls(room_id, start, horizon_days)
        for booking in bookings:
            if booking.blocks_calendar():
                calendar._mark(booking.dates, booking.id)
        return calendar

    @classmethod
    def covering(
        cls,
        room_id,
        bookings: Iterable['Booking'],
        today: date,
        dates: DateRange | None = None,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> 'AvailabilityCalendar':
        """Build a calendar spanning the default horizon and, if given, ``dates``."""
        start = as_date(today)
        end = start + timedelta(days=horizon_days)
        if dates is not None:
            start = min(start, dates.start_date)
            end = max(end, dates.end_date)
        return cls.build(room_id, bookings, start, (end - start).days)

    @property
    def end(self) -> date:
        """First date after the horizon"""
        return self.start + timedelta(days=self.horizon_days)

    def covers(self, dates: DateRange) -> bool:
        return self.start <= dates.start_date and dates.end_date <= self.end

    def reserve(self, booking: 'Booking'):
        """Occupy the booking's nights that fall inside the horizon"""
        self._mark(booking.dates, booking.id)

    def release(self, booking_id: UUID):
        """Free every night owned by the booking"""
        for day, entry in self._days.items():
            if entry.booking_id == booking_id:
                self._days[day] = CalendarDay(day)

    def first_unavailable(self, dates: DateRange) -> CalendarDay | None:
        """Earliest occupied night of ``dates``, if any"""
        for day in dates:
            entry = self._days.get(day)
            if entry is not None and not entry.available:
                return entry
        return None

    def is_available(self, day: date | datetime) -> bool:
        return self[day].available

    def disabled_dates(self) -> List[date]:
        """Occupied dates in order, as the booking forms grey them out"""
        return [entry.day for entry in self if not entry.available]

    def as_dict(self) -> Dict[date, CalendarDay]:
        return dict(self._days)

    def _mark(self, dates: DateRange, booking_id: UUID):
        for day in dates:
            if day in self._days:
                self._days[day] = CalendarDay(day, available=False, booking_id=booking_id)

    def __getitem__(self, day: date | datetime) -> CalendarDay:
        return self._days[as_date(day)]

    def __contains__(self, day) -> bool:
        return as_date(day) in self._days

    def __iter__(self) -> Iterator[CalendarDay]:
        return iter(self._days[day] for day in sorted(self._days))

    def __len__(self) -> int:
        return len(self._days)

    def __eq__(self, other):
        if not isinstance(other, AvailabilityCalendar):
            return NotImplemented
        return self.room_id == other.room_id and self._days == other._days

    def __repr__(self):
        return (
            f"AvailabilityCalendar(room_id={self.room_id}, start={self.start}, "
            f"days={self.horizon_days}, occupied={len(self.disabled_dates())})"
        )


def current_booking(bookings: Iterable['Booking'], today: date) -> 'Booking | None':
    """Confirmed booking occupying the room tonight"""
    return next(
        (b for b in bookings if b.blocks_calendar() and b.dates.contains(today)),
        None,
    )


def next_booking(bookings: Iterable['Booking'], today: date) -> 'Booking | None':
    """Earliest confirmed booking arriving after today"""
    upcoming = [b for b in bookings if b.blocks_calendar() and b.dates.start_date > today]
    return min(upcoming, key=lambda b: b.dates.start_date, default=None)
