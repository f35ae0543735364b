"""
Reservation Service

Single entry point for every booking flow (guest checkout, hotel manager
desk, admin "book for customer"). It orchestrates the calendar, the
conflict checker, pricing and the booking lifecycle, and persists through
the BookingStore.

Double booking prevention:
1. Per-room in-process lock (RoomLockRegistry) around every write
2. Unit of Work transaction; the Django store locks the room row
   (SELECT FOR UPDATE) while bookings are loaded
3. Availability is re-checked against freshly loaded bookings inside
   that critical section, right before the write
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List
from uuid import UUID

from shared.application.uow import AbstractUnitOfWork, DjangoUnitOfWork
from shared.domain.value_objects import DateRange, Money, as_date
from apps.bookings.application.interfaces import BookingStore, RoomDirectory, RoomInfo
from apps.bookings.application.locks import RoomLockRegistry
from apps.bookings.domain.calendar import (
    DEFAULT_HORIZON_DAYS,
    AvailabilityCalendar,
    current_booking,
    next_booking,
)
from apps.bookings.domain.conflicts import (
    AvailabilityResult,
    Unavailable,
    check_interval,
    validate_range,
)
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.errors import GuestLimitExceeded, NotFound, RoomUnavailable
from apps.bookings.domain.pricing import calculate_total
from apps.bookings.domain.value_objects import BookingDetails, Guests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomOverview:
    """What a booking screen shows for one room"""
    room: RoomInfo
    calendar: AvailabilityCalendar
    current_booking: Booking | None
    next_booking: Booking | None


class ReservationService:
    """Façade over availability, pricing and the booking lifecycle."""

    def __init__(
        self,
        store: BookingStore,
        rooms: RoomDirectory,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork] = DjangoUnitOfWork,
        locks: RoomLockRegistry | None = None,
        clock: Callable[[], date] = date.today,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        lock_timeout: float = 10.0,
    ):
        self._store = store
        self._rooms = rooms
        self._uow_factory = uow_factory
        self._locks = locks or RoomLockRegistry()
        self._clock = clock
        self._horizon_days = horizon_days
        self._lock_timeout = lock_timeout

    # ===== Queries =====

    def check_availability(
        self,
        room_id: UUID,
        check_in: date | datetime,
        check_out: date | datetime,
        *,
        allow_past: bool = False,
        max_age: float = 0,
    ) -> AvailabilityResult:
        """
        Tell whether the room is free for [check_in, check_out)

        Raises:
            InvalidRange, PastDate: the range itself is not bookable.
            NotFound: the room does not exist.
        """
        room = self._get_room(room_id)
        today = self._today()
        dates = validate_range(check_in, check_out, today, allow_past=allow_past)
        bookings = self._store.list_bookings_for_room(room.id, max_age=max_age)
        return self._verdict(room, self._calendar_for(room, bookings, today, dates), dates)

    def room_calendar(
        self,
        room_id: UUID,
        horizon_days: int | None = None,
        *,
        max_age: float = 0,
    ) -> AvailabilityCalendar:
        """Availability map from today over the horizon"""
        return self.room_overview(room_id, horizon_days, max_age=max_age).calendar

    def room_overview(
        self,
        room_id: UUID,
        horizon_days: int | None = None,
        *,
        max_age: float = 0,
    ) -> RoomOverview:
        room = self._get_room(room_id)
        today = self._today()
        bookings = self._store.list_bookings_for_room(room.id, max_age=max_age)
        calendar = AvailabilityCalendar.build(
            room.id, bookings, today, horizon_days or self._horizon_days
        )
        return RoomOverview(
            room=room,
            calendar=calendar,
            current_booking=current_booking(bookings, today),
            next_booking=next_booking(bookings, today),
        )

    def get_booking(self, booking_id: UUID) -> Booking:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise NotFound("Booking", booking_id)
        return booking

    # ===== Commands =====

    def create_booking(
        self,
        room_id: UUID,
        check_in: date | datetime,
        check_out: date | datetime,
        guests: Guests | None = None,
        initial_status: BookingStatus | str = BookingStatus.PENDING,
        *,
        details: BookingDetails | None = None,
        created_by: int | None = None,
        allow_past: bool = False,
    ) -> Booking:
        """
        Create a booking in PENDING or CONFIRMED status

        Returns: the persisted Booking

        Raises:
            InvalidRange, PastDate: the range is not bookable.
            NotFound: the room does not exist.
            GuestLimitExceeded: the party does not fit the room.
            RoomUnavailable: a confirmed booking holds one of the nights.
            StorageFailure: storage or the room lock failed; retry.
        """
        guests = guests or Guests()
        status = BookingStatus(initial_status)
        room = self._get_room(room_id)
        self._ensure_capacity(room, guests)
        today = self._today()
        dates = validate_range(check_in, check_out, today, allow_past=allow_past)

        logger.info(
            f"Creating {status.value} booking for room {room.id}, dates {dates}"
        )

        with self._locks.hold(room.id, self._lock_timeout):
            with self._uow_factory() as uow:
                bookings = self._store.list_bookings_for_room(room.id, lock=True)
                calendar = self._calendar_for(room, bookings, today, dates)
                result = self._verdict(room, calendar, dates)
                if not result.is_available:
                    logger.info(
                        f"Room {room.id} unavailable for {dates}, "
                        f"first conflict {result.first_conflicting_date}"
                    )
                    raise RoomUnavailable(result.first_conflicting_date, result.booking_id)

                booking = Booking.create(
                    room_id=room.id,
                    dates=dates,
                    guests=guests,
                    nightly_rate=Money(room.nightly_rate),
                    total_price=calculate_total(room.nightly_rate, dates.start_date, dates.end_date),
                    status=status,
                    details=details,
                    created_by=created_by,
                    calendar=calendar,
                )
                uow.collect_events(booking)
                saved = self._store.save_booking(booking)

        logger.info(f"Booking created successfully: {saved.booking_number} (ID: {saved.id})")
        return saved

    def confirm_booking(self, booking_id: UUID) -> Booking:
        """
        Confirm a pending booking

        Availability is re-validated under the room lock, so of two pending
        bookings for the same nights only the first confirmation wins.
        """
        logger.info(f"Confirming booking {booking_id}")
        room_id = self.get_booking(booking_id).room_id

        with self._locks.hold(room_id, self._lock_timeout):
            with self._uow_factory() as uow:
                bookings = self._store.list_bookings_for_room(room_id, lock=True)
                booking = self._pick(bookings, booking_id)
                room = self._get_room(room_id)
                others = [b for b in bookings if b.id != booking.id]
                calendar = self._calendar_for(room, others, self._today(), booking.dates)
                if not room.is_available and booking.can_transition_to(BookingStatus.CONFIRMED):
                    raise RoomUnavailable(booking.check_in)

                booking.confirm(calendar)
                uow.collect_events(booking)
                saved = self._store.update_booking_status(booking)

        logger.info(f"Booking {saved.booking_number} confirmed successfully")
        return saved

    def cancel_booking(self, booking_id: UUID, reason: str = '') -> Booking:
        """
        Cancel a pending or confirmed booking

        Cancelling an already cancelled booking returns it unchanged so
        retried requests are harmless.
        """
        logger.info(f"Cancelling booking {booking_id}, reason: {reason}")
        booking = self.get_booking(booking_id)
        if booking.status == BookingStatus.CANCELLED:
            return booking

        with self._locks.hold(booking.room_id, self._lock_timeout):
            with self._uow_factory() as uow:
                booking = self.get_booking(booking_id)
                if booking.status == BookingStatus.CANCELLED:
                    return booking

                booking.cancel(reason)
                uow.collect_events(booking)
                saved = self._store.update_booking_status(booking)

        logger.info(f"Booking {saved.booking_number} cancelled successfully")
        return saved

    def complete_booking(self, booking_id: UUID) -> Booking:
        """Complete a confirmed booking whose check-out day has come"""
        logger.info(f"Completing booking {booking_id}")
        room_id = self.get_booking(booking_id).room_id

        with self._locks.hold(room_id, self._lock_timeout):
            with self._uow_factory() as uow:
                booking = self.get_booking(booking_id)
                booking.complete(self._today())
                uow.collect_events(booking)
                saved = self._store.update_booking_status(booking)

        logger.info(f"Booking {saved.booking_number} completed successfully")
        return saved

    # ===== Helpers =====

    def _today(self) -> date:
        return as_date(self._clock())

    def _get_room(self, room_id: UUID) -> RoomInfo:
        room = self._rooms.get_room(room_id)
        if room is None:
            raise NotFound("Room", room_id)
        return room

    @staticmethod
    def _ensure_capacity(room: RoomInfo, guests: Guests):
        if guests.adults > room.max_adults or guests.children > room.max_children:
            raise GuestLimitExceeded(
                guests.adults, guests.children, room.max_adults, room.max_children
            )

    def _calendar_for(
        self,
        room: RoomInfo,
        bookings: List[Booking],
        today: date,
        dates: DateRange,
    ) -> AvailabilityCalendar:
        return AvailabilityCalendar.covering(room.id, bookings, today, dates, self._horizon_days)

    @staticmethod
    def _verdict(room: RoomInfo, calendar: AvailabilityCalendar, dates: DateRange) -> AvailabilityResult:
        if not room.is_available:
            return Unavailable(dates.start_date)
        return check_interval(calendar, dates)

    @staticmethod
    def _pick(bookings: List[Booking], booking_id: UUID) -> Booking:
        booking = next((b for b in bookings if b.id == booking_id), None)
        if booking is None:
            raise NotFound("Booking", booking_id)
        return booking
