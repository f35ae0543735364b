"""Wiring of the reservation service for the Django project."""

from __future__ import annotations

from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from apps.bookings.application.locks import RoomLockRegistry
from apps.bookings.application.reservation_service import ReservationService
from apps.bookings.conf import booking_setting
from apps.bookings.infrastructure.cache import CachedBookingStore
from apps.bookings.infrastructure.django_store import DjangoBookingStore
from apps.hotels.directory import DjangoRoomDirectory

# Shared by every service instance in this process
room_locks = RoomLockRegistry()


def build_reservation_service() -> ReservationService:
    return ReservationService(
        CachedBookingStore(DjangoBookingStore()),
        DjangoRoomDirectory(),
        uow_factory=DjangoUnitOfWork,
        locks=room_locks,
        clock=timezone.localdate,
        horizon_days=booking_setting("HORIZON_DAYS"),
        lock_timeout=booking_setting("LOCK_TIMEOUT"),
    )
