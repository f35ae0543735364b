"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a reservation
- BookingStatus: FSM states for booking lifecycle
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4

from shared.domain.base import Aggregate, utc_now
from shared.domain.value_objects import DateRange, Money
from apps.bookings.domain.calendar import AvailabilityCalendar
from apps.bookings.domain.conflicts import check_interval
from apps.bookings.domain.errors import InvalidTransition, RoomUnavailable
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
)
from apps.bookings.domain.value_objects import BookingDetails, Guests


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (payment captured or manager approval)
    - PENDING -> CANCELLED
    - CONFIRMED -> CANCELLED
    - CONFIRMED -> COMPLETED (guest checked out)
    """
    PENDING = 'pending'        # Provisional hold, does not block dates
    CONFIRMED = 'confirmed'    # Blocks the room's nights
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

INITIAL_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a guest's reservation of a room for specific nights.

    Key invariants:
    - Booking must have valid date range (check_in < check_out)
    - Only CONFIRMED bookings block room dates
    - total_price is fixed at creation
    - Status only changes through the transitions in ALLOWED_TRANSITIONS

    Transition methods take the room's AvailabilityCalendar when the caller
    wants the calendar kept in step. Each method validates first and mutates
    after, so a rejected transition leaves booking and calendar untouched.
    """

    booking_number: str
    room_id: UUID
    dates: DateRange
    guests: Guests
    nightly_rate: Money
    total_price: Money
    status: BookingStatus = BookingStatus.PENDING
    details: BookingDetails = field(default_factory=BookingDetails)
    created_by: int | None = None

    cancellation_reason: str = ''
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        room_id: UUID,
        dates: DateRange,
        guests: Guests,
        nightly_rate: Money,
        total_price: Money,
        status: BookingStatus = BookingStatus.PENDING,
        details: BookingDetails | None = None,
        created_by: int | None = None,
        calendar: AvailabilityCalendar | None = None,
    ) -> 'Booking':
        """
        Create a booking in PENDING or CONFIRMED status

        A CONFIRMED booking is reserved in ``calendar`` right away.
        Events: BookingCreated
        """
        if status not in INITIAL_STATUSES:
            raise InvalidTransition('new', status.value, "bookings start as pending or confirmed")

        now = utc_now()
        booking = cls(
            id=uuid4(),
            booking_number=cls.generate_number(now),
            room_id=room_id,
            dates=dates,
            guests=guests,
            nightly_rate=nightly_rate,
            total_price=total_price,
            status=status,
            details=details or BookingDetails(),
            created_by=created_by,
            created_at=now,
            updated_at=now,
            confirmed_at=now if status == BookingStatus.CONFIRMED else None,
        )

        if calendar is not None and booking.blocks_calendar():
            calendar.reserve(booking)

        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            room_id=room_id,
            dates=dates,
            total_price=total_price,
            status=status.value,
        ))
        return booking

    @staticmethod
    def generate_number(now: datetime | None = None) -> str:
        """Generate booking number: BK{timestamp}{random}"""
        timestamp = (now or utc_now()).strftime('%Y%m%d%H%M%S')
        return f"BK{timestamp}{uuid4().hex[:6].upper()}"

    def confirm(self, calendar: AvailabilityCalendar | None = None):
        """
        Confirm booking (PENDING -> CONFIRMED)

        With a calendar, the nights are re-checked against the current
        confirmed bookings first; another guest may have taken them since
        this booking was created.
        Events: BookingConfirmed
        """
        self._ensure_transition(BookingStatus.CONFIRMED)

        if calendar is not None:
            result = check_interval(calendar, self.dates)
            if not result.is_available:
                raise RoomUnavailable(result.first_conflicting_date, result.booking_id)

        self.status = BookingStatus.CONFIRMED
        self.confirmed_at = self._touch()
        if calendar is not None:
            calendar.reserve(self)

        self.add_event(BookingConfirmed(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            dates=self.dates,
        ))

    def cancel(self, reason: str = '', calendar: AvailabilityCalendar | None = None):
        """
        Cancel booking (PENDING|CONFIRMED -> CANCELLED)

        A confirmed booking frees its nights.
        Events: BookingCancelled
        """
        self._ensure_transition(BookingStatus.CANCELLED)

        old_status = self.status
        was_blocking = self.blocks_calendar()
        self.status = BookingStatus.CANCELLED
        self.cancellation_reason = reason
        self.cancelled_at = self._touch()
        if calendar is not None and was_blocking:
            calendar.release(self.id)

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            dates=self.dates,
            reason=reason,
            old_status=old_status.value,
            released_dates=was_blocking,
        ))

    def complete(self, today: date, calendar: AvailabilityCalendar | None = None):
        """
        Complete booking (CONFIRMED -> COMPLETED)

        Allowed once the check-out day has been reached.
        Events: BookingCompleted
        """
        self._ensure_transition(BookingStatus.COMPLETED)
        if today < self.check_out:
            raise InvalidTransition(
                self.status.value,
                BookingStatus.COMPLETED.value,
                f"stay ends on {self.check_out.isoformat()}",
            )

        self.status = BookingStatus.COMPLETED
        self.completed_at = self._touch()
        if calendar is not None:
            calendar.release(self.id)

        self.add_event(BookingCompleted(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
        ))

    def can_transition_to(self, target: BookingStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def blocks_calendar(self) -> bool:
        """Only CONFIRMED bookings block room dates"""
        return self.status == BookingStatus.CONFIRMED

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    @property
    def check_in(self) -> date:
        return self.dates.start_date

    @property
    def check_out(self) -> date:
        return self.dates.end_date

    @property
    def nights(self) -> int:
        return len(self.dates)

    def _ensure_transition(self, target: BookingStatus):
        if not self.can_transition_to(target):
            raise InvalidTransition(self.status.value, target.value)

    def _touch(self) -> datetime:
        self.updated_at = utc_now()
        return self.updated_at

    def __str__(self):
        return f"Booking {self.booking_number} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, booking_number={self.booking_number}, "
            f"status={self.status.value}, dates={self.dates})"
        )
