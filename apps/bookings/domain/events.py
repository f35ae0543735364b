"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange, Money


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created (pending or confirmed)

    Triggers:
    - Drop cached availability for the room when it blocks dates
    """
    booking_id: UUID
    room_id: UUID
    dates: DateRange
    total_price: Money
    status: str


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """
    Event: Booking confirmed (PENDING -> CONFIRMED)

    The booking's nights are now blocked.
    """
    booking_id: UUID
    room_id: UUID
    dates: DateRange


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    ``released_dates`` is true when the booking had been blocking the calendar.
    """
    booking_id: UUID
    room_id: UUID
    dates: DateRange
    reason: str
    old_status: str
    released_dates: bool


@dataclass(kw_only=True)
class BookingCompleted(DomainEvent):
    """Event: Stay finished (CONFIRMED -> COMPLETED)"""
    booking_id: UUID
    room_id: UUID
