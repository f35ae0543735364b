"""API views for the booking domain.

Reads of booking lists go through the ORM (filters, pagination); every
state change goes through the reservation service.
"""

from __future__ import annotations

import logging

from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.hotels.models import Room

from .conf import booking_setting
from .domain.entities import BookingStatus
from .domain.errors import (
    BookingError,
    GuestLimitExceeded,
    InvalidRange,
    InvalidTransition,
    NotFound,
    PastDate,
    RoomUnavailable,
    StorageFailure,
)
from .domain.value_objects import BookingDetails, Guests, PaymentMethod
from .filters import BookingFilterSet
from .infrastructure.django_store import to_domain
from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    CalendarDaySerializer,
)
from .services import build_reservation_service

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidRange: status.HTTP_400_BAD_REQUEST,
    PastDate: status.HTTP_400_BAD_REQUEST,
    GuestLimitExceeded: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    RoomUnavailable: status.HTTP_409_CONFLICT,
    InvalidTransition: status.HTTP_409_CONFLICT,
    StorageFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def booking_error_response(exc: BookingError) -> Response:
    """Map an engine error to an API response."""
    payload = {"code": exc.code.value, "detail": exc.message}
    if isinstance(exc, RoomUnavailable):
        payload["first_conflicting_date"] = exc.first_conflicting_date.isoformat()
    http_status = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    if http_status >= 500:
        logger.warning(f"Booking request failed: {exc}")
    return Response(payload, status=http_status)


class BookingErrorMixin:
    """Turns BookingError raised by the service into JSON responses."""

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, BookingError):
            return booking_error_response(exc)
        return super().handle_exception(exc)  # type: ignore


def is_hotel_staff(user, booking: Booking) -> bool:
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return booking.room.hotel.manager_id == user.id


class IsBookingStakeholder(permissions.BasePermission):
    """Guests see their own bookings; hotel managers and admins see their hotels'."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return is_hotel_staff(user, obj) or obj.created_by_id == user.id


class IsHotelStaff(permissions.BasePermission):
    """Only the hotel's manager or an admin may confirm or complete a stay."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        return request.user.is_authenticated and is_hotel_staff(request.user, obj)


class BookingViewSet(
    BookingErrorMixin,
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for creating bookings and driving their lifecycle."""

    queryset = Booking.objects.select_related("room", "room__hotel").all()
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    filterset_class = BookingFilterSet

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "cancel":
            return BookingCancelSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        if user.managed_hotels.exists():
            return qs.filter(room__hotel__manager=user)
        return qs.filter(created_by=user)

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        records = page if page is not None else queryset
        data = BookingSerializer([to_domain(record) for record in records], many=True).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        record: Booking = self.get_object()  # type: ignore
        return Response(BookingSerializer(to_domain(record)).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = request.user

        initial_status = BookingStatus(data["initial_status"])
        is_staff = getattr(user, "is_staff", False)
        at_desk = self._is_hotel_desk(user, data["room"])
        if at_desk and not data["customer_id_number"]:
            # Walk-in guests are registered with their national ID or passport
            raise serializers.ValidationError({"customer_id_number": ["This field is required for desk bookings."]})
        if initial_status == BookingStatus.CONFIRMED and not at_desk:
            # Guests always start in PENDING until payment confirms the stay
            initial_status = BookingStatus.PENDING

        booking = build_reservation_service().create_booking(
            data["room"],
            data["check_in"],
            data["check_out"],
            Guests(adults=data["adults"], children=data["children"]),
            initial_status,
            details=BookingDetails(
                customer_name=data["customer_name"],
                customer_email=data["customer_email"],
                customer_id_number=data["customer_id_number"],
                special_requests=data["special_requests"],
                payment_method=PaymentMethod(data["payment_method"]),
            ),
            created_by=user.id,
            allow_past=is_staff and booking_setting("ALLOW_BACKDATED_STAFF_BOOKINGS"),
        )
        read_serializer = BookingSerializer(booking)
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, IsHotelStaff])
    def confirm(self, request, pk=None):  # type: ignore
        record: Booking = self.get_object()  # type: ignore
        booking = build_reservation_service().confirm_booking(record.pk)
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, IsBookingStakeholder])
    def cancel(self, request, pk=None):  # type: ignore
        record: Booking = self.get_object()  # type: ignore
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = build_reservation_service().cancel_booking(record.pk, serializer.validated_data["reason"])
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, IsHotelStaff])
    def complete(self, request, pk=None):  # type: ignore
        record: Booking = self.get_object()  # type: ignore
        booking = build_reservation_service().complete_booking(record.pk)
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @staticmethod
    def _is_hotel_desk(user, room_id) -> bool:
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        return Room.objects.filter(pk=room_id, hotel__manager=user).exists()


class RoomAvailabilityView(BookingErrorMixin, APIView):
    """
    Public availability of a room.

    With ``check_in`` and ``check_out`` it answers whether the stay is free;
    without them it returns the calendar with the disabled dates the
    booking form greys out.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, room_id):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        service = build_reservation_service()

        if "check_in" in params:
            result = service.check_availability(room_id, params["check_in"], params["check_out"])
            first_conflict = None if result.is_available else result.first_conflicting_date.isoformat()
            return Response(
                {
                    "room_id": str(room_id),
                    "check_in": params["check_in"].isoformat(),
                    "check_out": params["check_out"].isoformat(),
                    "available": result.is_available,
                    "first_conflicting_date": first_conflict,
                }
            )

        overview = service.room_overview(
            room_id,
            params.get("horizon_days"),
            max_age=booking_setting("AVAILABILITY_CACHE_TTL"),
        )
        calendar = overview.calendar
        return Response(
            {
                "room_id": str(room_id),
                "is_available": overview.room.is_available,
                "start": calendar.start.isoformat(),
                "end": calendar.end.isoformat(),
                "disabled_dates": [day.isoformat() for day in calendar.disabled_dates()],
                "days": CalendarDaySerializer(list(calendar), many=True).data,
                "current_booking_id": str(overview.current_booking.id) if overview.current_booking else None,
                "next_booking": (
                    {
                        "id": str(overview.next_booking.id),
                        "check_in": overview.next_booking.check_in.isoformat(),
                        "check_out": overview.next_booking.check_out.isoformat(),
                    }
                    if overview.next_booking
                    else None
                ),
            }
        )

