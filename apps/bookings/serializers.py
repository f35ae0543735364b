"""Serializers for the booking API.

Output serializers read domain objects (Booking aggregate, calendar days),
not ORM rows.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.value_objects import PaymentMethod
from .models import Booking as BookingRecord

INITIAL_STATUS_CHOICES = [
    BookingRecord.Status.PENDING,
    BookingRecord.Status.CONFIRMED,
]


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a guest, a hotel manager or an admin."""

    room = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    adults = serializers.IntegerField(min_value=1, default=1)
    children = serializers.IntegerField(min_value=0, default=0)
    initial_status = serializers.ChoiceField(
        choices=INITIAL_STATUS_CHOICES,
        default=BookingRecord.Status.PENDING,
    )
    payment_method = serializers.ChoiceField(
        choices=[method.value for method in PaymentMethod],
        default=PaymentMethod.CASH.value,
    )
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    customer_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    customer_id_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=64)


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class BookingSerializer(serializers.Serializer):
    """Read-only representation of a Booking aggregate."""

    id = serializers.UUIDField(read_only=True)
    booking_number = serializers.CharField(read_only=True)
    room_id = serializers.UUIDField(read_only=True)
    check_in = serializers.DateField(read_only=True)
    check_out = serializers.DateField(read_only=True)
    nights = serializers.IntegerField(read_only=True)
    adults = serializers.IntegerField(source="guests.adults", read_only=True)
    children = serializers.IntegerField(source="guests.children", read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    nightly_rate = serializers.DecimalField(
        source="nightly_rate.amount", max_digits=10, decimal_places=2, read_only=True
    )
    total_price = serializers.DecimalField(
        source="total_price.amount", max_digits=12, decimal_places=2, read_only=True
    )
    payment_method = serializers.CharField(source="details.payment_method.value", read_only=True)
    special_requests = serializers.CharField(source="details.special_requests", read_only=True)
    customer_name = serializers.CharField(source="details.customer_name", read_only=True)
    customer_email = serializers.CharField(source="details.customer_email", read_only=True)
    customer_id_number = serializers.CharField(source="details.customer_id_number", read_only=True)
    created_by = serializers.IntegerField(read_only=True, allow_null=True)
    cancellation_reason = serializers.CharField(read_only=True)
    confirmed_at = serializers.DateTimeField(read_only=True, allow_null=True)
    cancelled_at = serializers.DateTimeField(read_only=True, allow_null=True)
    completed_at = serializers.DateTimeField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class AvailabilityQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    horizon_days = serializers.IntegerField(required=False, min_value=1, max_value=366)

    def validate(self, attrs):  # type: ignore
        if ("check_in" in attrs) != ("check_out" in attrs):
            raise serializers.ValidationError("check_in and check_out must be given together.")
        return attrs


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField(source="day")
    available = serializers.BooleanField()
    booking_id = serializers.UUIDField(allow_null=True)
