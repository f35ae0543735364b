"""FilterSet for booking listings (hotel desk and admin screens)."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    room = django_filters.UUIDFilter(field_name="room_id")
    hotel = django_filters.UUIDFilter(field_name="room__hotel_id")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_out_to = django_filters.DateFilter(field_name="check_out", lookup_expr="lte")
    created_on = django_filters.DateFilter(field_name="created_at", lookup_expr="date")

    class Meta:
        model = Booking
        fields = ["room", "hotel", "status"]
