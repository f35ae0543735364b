"""Room directory backed by the hotels app."""

from __future__ import annotations

import logging
from uuid import UUID

from django.core.exceptions import ValidationError  # type: ignore
from django.db import DatabaseError  # type: ignore

from apps.bookings.application.interfaces import RoomDirectory, RoomInfo
from apps.bookings.domain.errors import StorageFailure

from .models import Room

logger = logging.getLogger(__name__)


def to_room_info(room: Room) -> RoomInfo:
    return RoomInfo(
        id=room.id,
        nightly_rate=room.nightly_rate,
        max_adults=room.max_adults,
        max_children=room.max_children,
        is_available=room.is_available,
        hotel_id=room.hotel_id,
    )


class DjangoRoomDirectory(RoomDirectory):
    """Reads rooms from the database; never writes."""

    def get_room(self, room_id: UUID) -> RoomInfo | None:
        try:
            room = Room.objects.filter(pk=room_id).first()
        except ValidationError:
            # Malformed identifiers cannot name a room
            return None
        except DatabaseError as exc:
            logger.error(f"Failed to load room {room_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return to_room_info(room) if room else None
