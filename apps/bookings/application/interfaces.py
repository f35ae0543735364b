"""Collaborator interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import List
from uuid import UUID

from apps.bookings.domain.entities import Booking


@dataclass(frozen=True)
class RoomInfo:
    """Read-only view of a room as the engine needs it."""

    id: UUID
    nightly_rate: Decimal
    max_adults: int = 1
    max_children: int = 0
    is_available: bool = True
    hotel_id: UUID | None = None


class RoomDirectory(ABC):
    """Interface for looking up rooms owned by the hotel catalogue."""

    @abstractmethod
    def get_room(self, room_id: UUID) -> RoomInfo | None:
        """Return the room, or None if it does not exist."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations.

    Implementations raise StorageFailure for I/O errors and must give
    read-your-writes consistency inside a unit of work.
    """

    @abstractmethod
    def list_bookings_for_room(
        self,
        room_id: UUID,
        *,
        lock: bool = False,
        max_age: float = 0,
    ) -> List[Booking]:
        """Return every booking of a room, any status.

        ``lock`` asks the store to hold the room until the surrounding
        transaction ends. ``max_age`` is how stale, in seconds, the caller
        tolerates the answer to be; 0 means read the source of truth.
        """
        ...

    @abstractmethod
    def get_booking(self, booking_id: UUID) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def save_booking(self, booking: Booking) -> Booking:
        """Insert a new booking."""
        ...

    @abstractmethod
    def update_booking_status(self, booking: Booking) -> Booking:
        """Persist the status and lifecycle timestamps of an existing booking."""
        ...
