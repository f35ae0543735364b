"""Tests for the ORM-backed store, the wiring and the completion task."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock
from uuid import uuid4

import pytest
from django.db import DatabaseError
from django.utils import timezone

from shared.domain.value_objects import DateRange, Money
from apps.bookings import models as orm
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.errors import NotFound, StorageFailure
from apps.bookings.domain.value_objects import BookingDetails, Guests, PaymentMethod
from apps.bookings.infrastructure.django_store import DjangoBookingStore
from apps.bookings.services import build_reservation_service
from apps.bookings.tasks import complete_finished_bookings
from apps.hotels.models import Hotel, Room


@pytest.fixture
def room(db) -> Room:
    hotel = Hotel.objects.create(name="Kuriftu")
    return Room.objects.create(hotel=hotel, room_number="12", nightly_rate=Decimal("1500.00"), max_adults=2)


def make_booking(room: Room, check_in: date, check_out: date, status=BookingStatus.PENDING) -> Booking:
    return Booking.create(
        room_id=room.id,
        dates=DateRange(check_in, check_out),
        guests=Guests(adults=2),
        nightly_rate=Money(room.nightly_rate),
        total_price=Money(room.nightly_rate) * len(DateRange(check_in, check_out)),
        status=status,
        details=BookingDetails(customer_name="Hanna", payment_method=PaymentMethod.BANK_TRANSFER),
    )


@pytest.mark.django_db
class TestDjangoBookingStore:
    def test_saved_booking_reads_back(self, room):
        store = DjangoBookingStore()
        booking = make_booking(room, date(2025, 6, 1), date(2025, 6, 4))

        store.save_booking(booking)
        loaded = store.get_booking(booking.id)

        assert loaded == booking
        assert loaded.dates == DateRange(date(2025, 6, 1), date(2025, 6, 4))
        assert loaded.total_price == Money(Decimal("4500.00"))
        assert loaded.details.payment_method == PaymentMethod.BANK_TRANSFER
        assert loaded.guests.adults == 2

    def test_lists_bookings_of_one_room(self, room):
        other_room = Room.objects.create(hotel=room.hotel, room_number="13", nightly_rate=Decimal("900.00"))
        store = DjangoBookingStore()
        store.save_booking(make_booking(room, date(2025, 6, 5), date(2025, 6, 6)))
        store.save_booking(make_booking(room, date(2025, 6, 1), date(2025, 6, 2)))
        store.save_booking(make_booking(other_room, date(2025, 6, 1), date(2025, 6, 2)))

        bookings = store.list_bookings_for_room(room.id, lock=True)

        assert [b.check_in for b in bookings] == [date(2025, 6, 1), date(2025, 6, 5)]

    def test_update_status(self, room):
        store = DjangoBookingStore()
        booking = store.save_booking(make_booking(room, date(2025, 6, 1), date(2025, 6, 4)))

        booking.cancel("duplicate")
        store.update_booking_status(booking)

        record = orm.Booking.objects.get(pk=booking.id)
        assert record.status == orm.Booking.Status.CANCELLED
        assert record.cancellation_reason == "duplicate"
        assert record.cancelled_at is not None

    def test_update_unknown_booking(self, room):
        booking = make_booking(room, date(2025, 6, 1), date(2025, 6, 4))

        with pytest.raises(NotFound):
            DjangoBookingStore().update_booking_status(booking)

    def test_missing_booking_is_none(self):
        assert DjangoBookingStore().get_booking(uuid4()) is None

    def test_database_errors_become_storage_failures(self, room):
        with mock.patch.object(orm.Booking.objects, "filter", side_effect=DatabaseError("connection lost")):
            with pytest.raises(StorageFailure):
                DjangoBookingStore().list_bookings_for_room(room.id)


@pytest.mark.django_db
class TestWiredService:
    def test_create_and_confirm_persist(self, room):
        service = build_reservation_service()
        today = timezone.localdate()

        booking = service.create_booking(room.id, today + timedelta(days=1), today + timedelta(days=3))
        service.confirm_booking(booking.id)

        record = orm.Booking.objects.get(pk=booking.id)
        assert record.status == orm.Booking.Status.CONFIRMED
        assert record.total_price == Decimal("3000.00")
        assert service.room_calendar(room.id).disabled_dates() == [
            today + timedelta(days=1),
            today + timedelta(days=2),
        ]

    def test_completion_task_completes_finished_stays(self, room):
        service = build_reservation_service()
        today = timezone.localdate()
        finished = service.create_booking(
            room.id, today - timedelta(days=3), today, initial_status=BookingStatus.CONFIRMED, allow_past=True
        )
        ongoing = service.create_booking(
            room.id, today, today + timedelta(days=2), initial_status=BookingStatus.CONFIRMED
        )

        result = complete_finished_bookings()

        assert result == {"completed": 1}
        assert orm.Booking.objects.get(pk=finished.id).status == orm.Booking.Status.COMPLETED
        assert orm.Booking.objects.get(pk=ongoing.id).status == orm.Booking.Status.CONFIRMED
