"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.hotels.models import Hotel, Room

User = get_user_model()


class BookingAPITests(APITestCase):
    """Covers creation, conflicts and the lifecycle actions."""

    def setUp(self) -> None:
        self.guest = User.objects.create_user(username="guest", email="guest@example.com", password="GuestPass123")
        self.manager = User.objects.create_user(
            username="manager", email="manager@example.com", password="ManagerPass123"
        )
        self.hotel = Hotel.objects.create(name="Blue Nile", city="Bahir Dar", manager=self.manager)
        self.room = Room.objects.create(
            hotel=self.hotel,
            room_number="101",
            room_type=Room.RoomType.DOUBLE,
            nightly_rate=Decimal("1000.00"),
            max_adults=2,
            max_children=1,
        )
        self.today = timezone.localdate()
        self.client.force_authenticate(self.guest)
        self.list_url = reverse("booking-list")

    def _payload(self, start: int, end: int, **extra) -> dict:
        payload = {
            "room": str(self.room.id),
            "check_in": str(self.today + timedelta(days=start)),
            "check_out": str(self.today + timedelta(days=end)),
            "adults": 2,
            "customer_id_number": "ET-0012345",
        }
        payload.update(extra)
        return payload

    def _book_as_manager(self, start: int, end: int) -> dict:
        self.client.force_authenticate(self.manager)
        response = self.client.post(
            self.list_url, self._payload(start, end, initial_status="confirmed"), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_guest_can_create_booking(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(1, 4, customer_name="Abebe", payment_method="telebirr"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["total_price"], "3000.00")
        self.assertEqual(response.data["nights"], 3)
        booking = Booking.objects.get()
        self.assertEqual(booking.created_by, self.guest)
        self.assertEqual(booking.room, self.room)
        self.assertEqual(booking.payment_method, "telebirr")

    def test_guest_cannot_create_confirmed_booking(self) -> None:
        response = self.client.post(self.list_url, self._payload(1, 3, initial_status="confirmed"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")

    def test_prevent_double_booking_on_overlap(self) -> None:
        self._book_as_manager(1, 4)

        conflict_response = self.client.post(
            self.list_url, self._payload(2, 5, initial_status="confirmed"), format="json"
        )

        self.assertEqual(conflict_response.status_code, status.HTTP_409_CONFLICT, conflict_response.data)
        self.assertEqual(conflict_response.data["code"], "ROOM_UNAVAILABLE")
        self.assertEqual(
            conflict_response.data["first_conflicting_date"], str(self.today + timedelta(days=2))
        )
        self.assertEqual(Booking.objects.count(), 1)

    def test_booking_can_start_on_checkout_day(self) -> None:
        self._book_as_manager(1, 4)

        response = self.client.post(self.list_url, self._payload(4, 6, initial_status="confirmed"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_invalid_range(self) -> None:
        response = self.client.post(self.list_url, self._payload(3, 3), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "INVALID_RANGE")

    def test_guest_cannot_book_in_the_past(self) -> None:
        response = self.client.post(self.list_url, self._payload(-2, 1), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "PAST_DATE")

    def test_staff_can_backdate_booking(self) -> None:
        admin = User.objects.create_user(username="admin", password="AdminPass123", is_staff=True)
        self.client.force_authenticate(admin)

        response = self.client.post(self.list_url, self._payload(-2, 1, initial_status="confirmed"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "confirmed")

    def test_desk_booking_requires_customer_id_number(self) -> None:
        self.client.force_authenticate(self.manager)
        payload = self._payload(1, 3, initial_status="confirmed")
        payload.pop("customer_id_number")

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("customer_id_number", response.data)
        self.assertFalse(Booking.objects.exists())

    def test_online_guest_may_omit_customer_id_number(self) -> None:
        payload = self._payload(1, 3)
        payload.pop("customer_id_number")

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["customer_id_number"], "")

    def test_created_booking_is_returned_in_full(self) -> None:
        response = self._book_as_manager(1, 3)

        self.assertEqual(response["status"], "confirmed")
        self.assertEqual(response["customer_id_number"], "ET-0012345")
        self.assertEqual(Booking.objects.get(pk=response["id"]).customer_id_number, "ET-0012345")

    def test_party_larger_than_room(self) -> None:
        response = self.client.post(self.list_url, self._payload(1, 3, children=2), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "GUEST_LIMIT_EXCEEDED")

    def test_unknown_room(self) -> None:
        payload = self._payload(1, 3)
        payload["room"] = "00000000-0000-0000-0000-000000000000"

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_anonymous_user_cannot_book(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(self.list_url, self._payload(1, 3), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_manager_confirms_pending_booking(self) -> None:
        created = self.client.post(self.list_url, self._payload(1, 3), format="json").data
        confirm_url = reverse("booking-confirm", args=[created["id"]])

        guest_response = self.client.post(confirm_url)
        self.assertEqual(guest_response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.manager)
        response = self.client.post(confirm_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertIsNotNone(response.data["confirmed_at"])

    def test_confirm_rechecks_availability(self) -> None:
        pending = self.client.post(self.list_url, self._payload(1, 4), format="json").data
        self._book_as_manager(3, 5)

        response = self.client.post(reverse("booking-confirm", args=[pending["id"]]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(Booking.objects.get(pk=pending["id"]).status, Booking.Status.PENDING)

    def test_guest_cancels_own_booking_twice(self) -> None:
        created = self.client.post(self.list_url, self._payload(1, 3), format="json").data
        cancel_url = reverse("booking-cancel", args=[created["id"]])

        first = self.client.post(cancel_url, {"reason": "change of plans"}, format="json")
        second = self.client.post(cancel_url, {}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertEqual(second.status_code, status.HTTP_200_OK, second.data)
        self.assertEqual(second.data["status"], "cancelled")
        self.assertEqual(second.data["cancellation_reason"], "change of plans")

    def test_cancelled_booking_frees_dates(self) -> None:
        created = self._book_as_manager(1, 4)
        self.client.post(reverse("booking-cancel", args=[created["id"]]), format="json")

        response = self.client.post(self.list_url, self._payload(1, 4, initial_status="confirmed"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_complete_before_checkout_conflicts(self) -> None:
        created = self._book_as_manager(0, 2)

        response = self.client.post(reverse("booking-complete", args=[created["id"]]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "INVALID_TRANSITION")

    def test_guest_sees_only_own_bookings(self) -> None:
        self._book_as_manager(5, 7)
        self.client.force_authenticate(self.guest)
        self.client.post(self.list_url, self._payload(1, 3), format="json")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_manager_filters_hotel_bookings(self) -> None:
        self.client.post(self.list_url, self._payload(1, 3), format="json")
        self._book_as_manager(5, 7)

        response = self.client.get(self.list_url, {"hotel": str(self.hotel.id), "status": "confirmed"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["check_in"], str(self.today + timedelta(days=5)))

    def test_retrieve_booking(self) -> None:
        created = self.client.post(self.list_url, self._payload(1, 3), format="json").data

        response = self.client.get(reverse("booking-detail", args=[created["id"]]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["booking_number"], created["booking_number"])


class RoomAvailabilityAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = Hotel.objects.create(name="Blue Nile")
        self.room = Room.objects.create(hotel=self.hotel, room_number="201", nightly_rate=Decimal("800.00"))
        self.today = timezone.localdate()
        self.url = reverse("room-availability", args=[self.room.id])

    def _confirmed_booking(self, start: int, end: int) -> Booking:
        return Booking.objects.create(
            booking_number=f"BKTEST{start}{end}",
            room=self.room,
            check_in=self.today + timedelta(days=start),
            check_out=self.today + timedelta(days=end),
            status=Booking.Status.CONFIRMED,
            nightly_rate=self.room.nightly_rate,
            total_price=self.room.nightly_rate * (end - start),
        )

    def test_calendar_lists_disabled_dates(self) -> None:
        booking = self._confirmed_booking(2, 4)

        response = self.client.get(self.url, {"horizon_days": 10})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["disabled_dates"],
            [str(self.today + timedelta(days=2)), str(self.today + timedelta(days=3))],
        )
        self.assertEqual(len(response.data["days"]), 10)
        self.assertEqual(response.data["next_booking"]["id"], str(booking.id))
        self.assertIsNone(response.data["current_booking_id"])

    def test_availability_verdict(self) -> None:
        self._confirmed_booking(2, 4)

        busy = self.client.get(
            self.url,
            {"check_in": str(self.today + timedelta(days=3)), "check_out": str(self.today + timedelta(days=6))},
        )
        free = self.client.get(
            self.url,
            {"check_in": str(self.today + timedelta(days=4)), "check_out": str(self.today + timedelta(days=6))},
        )

        self.assertFalse(busy.data["available"])
        self.assertEqual(busy.data["first_conflicting_date"], str(self.today + timedelta(days=3)))
        self.assertTrue(free.data["available"])
        self.assertIsNone(free.data["first_conflicting_date"])

    def test_check_in_without_check_out(self) -> None:
        response = self.client.get(self.url, {"check_in": str(self.today)})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_room(self) -> None:
        response = self.client.get(reverse("room-availability", args=["00000000-0000-0000-0000-000000000000"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_database_outage_is_reported_as_unavailable_service(self) -> None:
        with mock.patch.object(Room.objects, "filter", side_effect=DatabaseError("connection lost")):
            response = self.client.get(self.url, {"horizon_days": 5})

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE, response.data)
        self.assertEqual(response.data["code"], "STORAGE_FAILURE")
