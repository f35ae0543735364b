"""Django ORM implementation of the BookingStore."""

from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from django.db import DatabaseError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from shared.domain.value_objects import DateRange, Money
from apps.bookings import models as orm
from apps.bookings.application.interfaces import BookingStore
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.errors import NotFound, StorageFailure
from apps.bookings.domain.value_objects import BookingDetails, Guests, PaymentMethod
from apps.hotels.models import Room

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def to_domain(record: orm.Booking) -> Booking:
    return Booking(
        id=record.id,
        booking_number=record.booking_number,
        room_id=record.room_id,
        dates=DateRange(record.check_in, record.check_out),
        guests=Guests(adults=record.adults, children=record.children),
        nightly_rate=Money(record.nightly_rate),
        total_price=Money(record.total_price),
        status=BookingStatus(record.status),
        details=BookingDetails(
            customer_name=record.customer_name,
            customer_email=record.customer_email,
            customer_id_number=record.customer_id_number,
            special_requests=record.special_requests,
            payment_method=PaymentMethod(record.payment_method),
        ),
        created_by=record.created_by_id,
        cancellation_reason=record.cancellation_reason,
        confirmed_at=record.confirmed_at,
        cancelled_at=record.cancelled_at,
        completed_at=record.completed_at,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def to_record(booking: Booking) -> orm.Booking:
    details = booking.details
    return orm.Booking(
        id=booking.id,
        booking_number=booking.booking_number,
        room_id=booking.room_id,
        check_in=booking.check_in,
        check_out=booking.check_out,
        adults=booking.guests.adults,
        children=booking.guests.children,
        status=booking.status.value,
        nightly_rate=booking.nightly_rate.amount,
        total_price=booking.total_price.amount,
        payment_method=details.payment_method.value,
        special_requests=details.special_requests,
        customer_name=details.customer_name,
        customer_email=details.customer_email,
        customer_id_number=details.customer_id_number,
        created_by_id=booking.created_by,
        cancellation_reason=booking.cancellation_reason,
        confirmed_at=booking.confirmed_at,
        cancelled_at=booking.cancelled_at,
        completed_at=booking.completed_at,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


class DjangoBookingStore(BookingStore):
    """Database-backed booking store using the Django ORM."""

    def list_bookings_for_room(self, room_id: UUID, *, lock: bool = False, max_age: float = 0) -> List[Booking]:
        try:
            if lock:
                # Lock the room row; concurrent writers for the room queue here
                list(_lock_queryset_if_possible(Room.objects.filter(pk=room_id)).values_list("pk", flat=True))
            records = orm.Booking.objects.filter(room_id=room_id).order_by("check_in", "created_at")
            return [to_domain(record) for record in records]
        except DatabaseError as exc:
            logger.error(f"Failed to load bookings for room {room_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc

    def get_booking(self, booking_id: UUID) -> Booking | None:
        try:
            record = orm.Booking.objects.filter(pk=booking_id).first()
        except DatabaseError as exc:
            logger.error(f"Failed to load booking {booking_id}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return to_domain(record) if record else None

    def save_booking(self, booking: Booking) -> Booking:
        try:
            to_record(booking).save(force_insert=True)
        except DatabaseError as exc:
            logger.error(f"Failed to save booking {booking.booking_number}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        return booking

    def update_booking_status(self, booking: Booking) -> Booking:
        values = {
            "status": booking.status.value,
            "cancellation_reason": booking.cancellation_reason,
            "confirmed_at": booking.confirmed_at,
            "cancelled_at": booking.cancelled_at,
            "completed_at": booking.completed_at,
            "updated_at": booking.updated_at,
        }
        try:
            updated = orm.Booking.objects.filter(pk=booking.id).update(**values)
        except DatabaseError as exc:
            logger.error(f"Failed to update booking {booking.booking_number}: {exc}", exc_info=True)
            raise StorageFailure() from exc
        if not updated:
            raise NotFound("Booking", booking.id)
        return booking
