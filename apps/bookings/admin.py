"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-mostly view; state changes go through the API so the calendar stays consistent."""

    list_display = (
        "booking_number",
        "room",
        "customer_name",
        "status",
        "payment_method",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_method", "check_in", "check_out", "room__hotel")
    search_fields = ("booking_number", "customer_name", "customer_email", "room__room_number")
    readonly_fields = (
        "booking_number",
        "room",
        "check_in",
        "check_out",
        "status",
        "nightly_rate",
        "total_price",
        "confirmed_at",
        "cancelled_at",
        "completed_at",
        "created_at",
        "updated_at",
    )
