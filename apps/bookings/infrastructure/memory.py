"""In-process implementations of the booking collaborators.

Used by tests and by tooling that runs the engine without a database.
Stored objects are copied on the way in and out so callers never share
state with the store.
"""

from __future__ import annotations

import copy
import threading
from typing import Dict, Iterable, List
from uuid import UUID

from apps.bookings.application.interfaces import BookingStore, RoomDirectory, RoomInfo
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.errors import NotFound


class InMemoryRoomDirectory(RoomDirectory):
    def __init__(self, rooms: Iterable[RoomInfo] = ()):
        self._rooms: Dict[UUID, RoomInfo] = {room.id: room for room in rooms}

    def add(self, room: RoomInfo) -> RoomInfo:
        self._rooms[room.id] = room
        return room

    def get_room(self, room_id: UUID) -> RoomInfo | None:
        return self._rooms.get(room_id)


class InMemoryBookingStore(BookingStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._bookings: Dict[UUID, Booking] = {}

    def list_bookings_for_room(self, room_id, *, lock=False, max_age=0) -> List[Booking]:
        with self._lock:
            found = [b for b in self._bookings.values() if b.room_id == room_id]
            return sorted((copy.deepcopy(b) for b in found), key=lambda b: b.created_at)

    def get_booking(self, booking_id: UUID) -> Booking | None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return copy.deepcopy(booking) if booking else None

    def save_booking(self, booking: Booking) -> Booking:
        with self._lock:
            self._bookings[booking.id] = copy.deepcopy(booking)
        return booking

    def update_booking_status(self, booking: Booking) -> Booking:
        with self._lock:
            stored = self._bookings.get(booking.id)
            if stored is None:
                raise NotFound("Booking", booking.id)
            stored.status = booking.status
            stored.cancellation_reason = booking.cancellation_reason
            stored.confirmed_at = booking.confirmed_at
            stored.cancelled_at = booking.cancelled_at
            stored.completed_at = booking.completed_at
            stored.updated_at = booking.updated_at
        return booking

    def all(self) -> List[Booking]:
        with self._lock:
            return [copy.deepcopy(b) for b in self._bookings.values()]
