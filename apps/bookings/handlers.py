"""Domain event handlers for the booking domain.

Registered on the message bus when the app is ready; they run after the
unit of work commits.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import MessageBus, message_bus
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
)
from apps.bookings.infrastructure.cache import invalidate_room_bookings

logger = logging.getLogger(__name__)

BOOKING_EVENTS = (BookingCreated, BookingConfirmed, BookingCancelled, BookingCompleted)


def invalidate_room_availability(event) -> None:
    """Drop cached bookings once the change is committed."""
    invalidate_room_bookings(event.room_id)


def log_booking_event(event) -> None:
    logger.info(
        f"[BOOKING] {event.__class__.__name__} booking={event.booking_id} room={event.room_id}"
    )


def register_handlers(bus: MessageBus = message_bus) -> None:
    for event_type in BOOKING_EVENTS:
        bus.register_event_handler(event_type, invalidate_room_availability)
        bus.register_event_handler(event_type, log_booking_event)
