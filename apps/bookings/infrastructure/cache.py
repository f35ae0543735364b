"""Read-through cache of room bookings.

Only reads that state a tolerated staleness (``max_age > 0``) are served
from the cache. Locked reads on the write path always reach the wrapped
store, so conflict checks never run against cached data.
"""

from __future__ import annotations

import time
from typing import List, Tuple
from uuid import UUID

from django.core.cache import cache  # type: ignore

from apps.bookings.application.interfaces import BookingStore
from apps.bookings.conf import booking_setting
from apps.bookings.domain.entities import Booking


def _cache_key(room_id: UUID) -> str:
    prefix = booking_setting("AVAILABILITY_CACHE_PREFIX")
    return f"{prefix}:{room_id}:bookings"


def invalidate_room_bookings(room_id: UUID) -> None:
    """Drop the cached bookings of a room."""
    cache.delete(_cache_key(room_id))


class CachedBookingStore(BookingStore):
    """Decorates another store with a short-lived per-room cache."""

    def __init__(self, inner: BookingStore, timeout: int | None = None):
        self._inner = inner
        self._timeout = booking_setting("AVAILABILITY_CACHE_TTL") if timeout is None else timeout

    def list_bookings_for_room(self, room_id: UUID, *, lock: bool = False, max_age: float = 0) -> List[Booking]:
        if lock:
            return self._inner.list_bookings_for_room(room_id, lock=True)

        if max_age > 0 and self._timeout:
            cached: Tuple[float, List[Booking]] | None = cache.get(_cache_key(room_id))
            if cached is not None and time.time() - cached[0] <= max_age:
                return cached[1]

        bookings = self._inner.list_bookings_for_room(room_id)
        if self._timeout:
            cache.set(_cache_key(room_id), (time.time(), bookings), self._timeout)
        return bookings

    def get_booking(self, booking_id: UUID) -> Booking | None:
        return self._inner.get_booking(booking_id)

    def save_booking(self, booking: Booking) -> Booking:
        saved = self._inner.save_booking(booking)
        invalidate_room_bookings(booking.room_id)
        return saved

    def update_booking_status(self, booking: Booking) -> Booking:
        updated = self._inner.update_booking_status(booking)
        invalidate_room_bookings(booking.room_id)
        return updated
