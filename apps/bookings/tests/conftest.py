"""Fixtures for engine tests that run without the database."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from shared.application.uow import InMemoryUnitOfWork
from apps.bookings.application.interfaces import RoomInfo
from apps.bookings.application.locks import RoomLockRegistry
from apps.bookings.application.reservation_service import ReservationService
from apps.bookings.infrastructure.memory import InMemoryBookingStore, InMemoryRoomDirectory

TODAY = date(2025, 5, 20)


@pytest.fixture
def room() -> RoomInfo:
    return RoomInfo(id=uuid4(), nightly_rate=Decimal("1000.00"), max_adults=2, max_children=2)


@pytest.fixture
def rooms(room) -> InMemoryRoomDirectory:
    return InMemoryRoomDirectory([room])


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def service(store, rooms) -> ReservationService:
    return ReservationService(
        store,
        rooms,
        uow_factory=InMemoryUnitOfWork,
        locks=RoomLockRegistry(),
        clock=lambda: TODAY,
        lock_timeout=1.0,
    )
