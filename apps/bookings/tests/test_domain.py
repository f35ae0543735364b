"""Tests for the calendar, conflict checker, pricing and booking lifecycle."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from shared.domain.value_objects import DateRange, Money
from apps.bookings.domain.calendar import AvailabilityCalendar, current_booking, next_booking
from apps.bookings.domain.conflicts import Available, Unavailable, check_interval, check_request, validate_range
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.errors import InvalidRange, InvalidTransition, PastDate, RoomUnavailable
from apps.bookings.domain.events import BookingCancelled, BookingConfirmed, BookingCreated
from apps.bookings.domain.pricing import calculate_total, count_nights
from apps.bookings.domain.value_objects import Guests

ROOM_ID = uuid4()
TODAY = date(2025, 5, 20)


def make_booking(check_in: date, check_out: date, status=BookingStatus.CONFIRMED) -> Booking:
    return Booking.create(
        room_id=ROOM_ID,
        dates=DateRange(check_in, check_out),
        guests=Guests(adults=2),
        nightly_rate=Money(Decimal("1000")),
        total_price=calculate_total(Decimal("1000"), check_in, check_out),
        status=status,
    )


class TestAvailabilityCalendar:
    def test_every_day_of_horizon_is_present(self):
        calendar = AvailabilityCalendar(ROOM_ID, TODAY, horizon_days=30)

        assert len(calendar) == 30
        assert TODAY in calendar
        assert TODAY + timedelta(days=29) in calendar
        assert TODAY + timedelta(days=30) not in calendar
        assert calendar.end == TODAY + timedelta(days=30)

    def test_horizon_must_be_positive(self):
        with pytest.raises(ValueError):
            AvailabilityCalendar(ROOM_ID, TODAY, horizon_days=0)

    def test_confirmed_booking_blocks_nights_but_not_checkout_day(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 4))

        calendar = AvailabilityCalendar.build(ROOM_ID, [booking], TODAY)

        assert calendar.disabled_dates() == [date(2025, 6, 1), date(2025, 6, 2), date(2025, 6, 3)]
        assert calendar[date(2025, 6, 2)].booking_id == booking.id
        assert calendar.is_available(date(2025, 6, 4))

    def test_pending_and_cancelled_bookings_do_not_block(self):
        pending = make_booking(date(2025, 6, 1), date(2025, 6, 4), BookingStatus.PENDING)
        cancelled = make_booking(date(2025, 6, 10), date(2025, 6, 12))
        cancelled.cancel("guest changed plans")

        calendar = AvailabilityCalendar.build(ROOM_ID, [pending, cancelled], TODAY)

        assert calendar.disabled_dates() == []

    def test_build_is_idempotent(self):
        bookings = [
            make_booking(date(2025, 6, 1), date(2025, 6, 4)),
            make_booking(date(2025, 6, 4), date(2025, 6, 6)),
        ]

        first = AvailabilityCalendar.build(ROOM_ID, bookings, TODAY)
        second = AvailabilityCalendar.build(ROOM_ID, bookings, TODAY)

        assert first == second

    def test_nights_outside_horizon_are_ignored(self):
        booking = make_booking(TODAY - timedelta(days=3), TODAY + timedelta(days=1))

        calendar = AvailabilityCalendar.build(ROOM_ID, [booking], TODAY, horizon_days=10)

        assert calendar.disabled_dates() == [TODAY]

    def test_covering_extends_horizon_to_requested_dates(self):
        far = DateRange(TODAY + timedelta(days=200), TODAY + timedelta(days=203))

        calendar = AvailabilityCalendar.covering(ROOM_ID, [], TODAY, far, horizon_days=90)

        assert calendar.covers(far)
        assert calendar.start == TODAY

    def test_reserve_and_release(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3))
        calendar = AvailabilityCalendar(ROOM_ID, TODAY)

        calendar.reserve(booking)
        assert not calendar.is_available(date(2025, 6, 1))

        calendar.release(booking.id)
        assert calendar.disabled_dates() == []

    def test_current_and_next_booking(self):
        staying = make_booking(TODAY - timedelta(days=1), TODAY + timedelta(days=2))
        later = make_booking(TODAY + timedelta(days=10), TODAY + timedelta(days=12))
        soon = make_booking(TODAY + timedelta(days=3), TODAY + timedelta(days=5))
        pending = make_booking(TODAY + timedelta(days=2), TODAY + timedelta(days=3), BookingStatus.PENDING)
        bookings = [staying, later, soon, pending]

        assert current_booking(bookings, TODAY) == staying
        assert next_booking(bookings, TODAY) == soon


class TestConflictChecker:
    def test_checkout_must_follow_checkin(self):
        with pytest.raises(InvalidRange):
            validate_range(date(2025, 6, 10), date(2025, 6, 10), TODAY)
        with pytest.raises(InvalidRange):
            validate_range(date(2025, 6, 10), date(2025, 6, 9), TODAY)

    def test_past_checkin_is_rejected_unless_allowed(self):
        with pytest.raises(PastDate):
            validate_range(TODAY - timedelta(days=1), TODAY + timedelta(days=1), TODAY)

        dates = validate_range(TODAY - timedelta(days=1), TODAY + timedelta(days=1), TODAY, allow_past=True)
        assert len(dates) == 2

    def test_checkin_today_is_allowed(self):
        assert validate_range(TODAY, TODAY + timedelta(days=1), TODAY) == DateRange(TODAY, TODAY + timedelta(days=1))

    def test_reports_first_conflicting_night(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 4))
        calendar = AvailabilityCalendar.build(ROOM_ID, [booking], TODAY)

        result = check_interval(calendar, DateRange(date(2025, 5, 30), date(2025, 6, 2)))

        assert result == Unavailable(date(2025, 6, 1), booking.id)
        assert not result.is_available

    def test_stay_starting_on_checkout_day_is_available(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 4))
        calendar = AvailabilityCalendar.build(ROOM_ID, [booking], TODAY)

        result = check_request(calendar, date(2025, 6, 4), date(2025, 6, 6), TODAY)

        assert result == Available()
        assert result.is_available

    def test_calendar_must_cover_the_stay(self):
        calendar = AvailabilityCalendar(ROOM_ID, TODAY, horizon_days=5)

        with pytest.raises(ValueError):
            check_interval(calendar, DateRange(TODAY, TODAY + timedelta(days=10)))


class TestPricing:
    def test_total_is_rate_times_nights(self):
        assert calculate_total(Decimal("1000"), date(2025, 6, 1), date(2025, 6, 4)) == Money(Decimal("3000"))

    def test_total_grows_with_the_stay(self):
        check_in = date(2025, 6, 1)
        totals = [
            calculate_total(Decimal("750.50"), check_in, check_in + timedelta(days=n)).amount
            for n in range(1, 15)
        ]

        assert totals == sorted(totals)
        assert len(set(totals)) == len(totals)

    def test_partial_days_round_up(self):
        assert count_nights(datetime(2025, 6, 1, 14), datetime(2025, 6, 3, 10)) == 2
        assert count_nights(datetime(2025, 6, 1, 10), datetime(2025, 6, 3, 14)) == 3

    def test_at_least_one_night(self):
        assert count_nights(datetime(2025, 6, 1, 14), datetime(2025, 6, 1, 18)) == 1

    def test_rate_must_be_positive(self):
        with pytest.raises(ValueError):
            calculate_total(Decimal("0"), date(2025, 6, 1), date(2025, 6, 2))


class TestBookingLifecycle:
    def test_create_emits_event_and_reserves_confirmed_nights(self):
        calendar = AvailabilityCalendar(ROOM_ID, TODAY)
        booking = Booking.create(
            room_id=ROOM_ID,
            dates=DateRange(date(2025, 6, 1), date(2025, 6, 3)),
            guests=Guests(),
            nightly_rate=Money(Decimal("1000")),
            total_price=Money(Decimal("2000")),
            status=BookingStatus.CONFIRMED,
            calendar=calendar,
        )

        assert booking.booking_number.startswith("BK")
        assert booking.confirmed_at is not None
        assert [type(e) for e in booking.events] == [BookingCreated]
        assert calendar.disabled_dates() == [date(2025, 6, 1), date(2025, 6, 2)]

    def test_create_rejects_terminal_status(self):
        with pytest.raises(InvalidTransition):
            make_booking(date(2025, 6, 1), date(2025, 6, 3), BookingStatus.CANCELLED)

    def test_confirm_pending_booking(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3), BookingStatus.PENDING)
        calendar = AvailabilityCalendar(ROOM_ID, TODAY)

        booking.confirm(calendar)

        assert booking.status == BookingStatus.CONFIRMED
        assert isinstance(booking.events[-1], BookingConfirmed)
        assert not calendar.is_available(date(2025, 6, 1))

    def test_confirm_rechecks_calendar_and_leaves_booking_untouched(self):
        taken = make_booking(date(2025, 6, 2), date(2025, 6, 5))
        calendar = AvailabilityCalendar.build(ROOM_ID, [taken], TODAY)
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3), BookingStatus.PENDING)

        with pytest.raises(RoomUnavailable) as excinfo:
            booking.confirm(calendar)

        assert excinfo.value.first_conflicting_date == date(2025, 6, 2)
        assert booking.status == BookingStatus.PENDING
        assert calendar[date(2025, 6, 1)].available

    def test_cancel_confirmed_booking_frees_nights(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3))
        calendar = AvailabilityCalendar.build(ROOM_ID, [booking], TODAY)

        booking.cancel("no show", calendar)

        assert booking.status == BookingStatus.CANCELLED
        assert booking.cancellation_reason == "no show"
        assert calendar.disabled_dates() == []
        event = booking.events[-1]
        assert isinstance(event, BookingCancelled)
        assert event.released_dates is True

    def test_complete_requires_checkout_day(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3))

        with pytest.raises(InvalidTransition):
            booking.complete(date(2025, 6, 2))

        booking.complete(date(2025, 6, 3))
        assert booking.status == BookingStatus.COMPLETED
        assert booking.is_terminal

    @pytest.mark.parametrize(
        "status, target",
        [
            (BookingStatus.PENDING, BookingStatus.COMPLETED),
            (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
            (BookingStatus.CANCELLED, BookingStatus.CANCELLED),
            (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
            (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED),
        ],
    )
    def test_disallowed_transitions(self, status, target):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3))
        booking.status = status

        assert not booking.can_transition_to(target)

    def test_cancelled_booking_cannot_be_cancelled_again(self):
        booking = make_booking(date(2025, 6, 1), date(2025, 6, 3))
        booking.cancel()

        with pytest.raises(InvalidTransition):
            booking.cancel()
