"""Admin registration for hotels and rooms."""

from __future__ import annotations

from django.contrib import admin

from .models import Hotel, Room


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ("room_number", "room_type", "nightly_rate", "max_adults", "max_children", "is_available")


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "manager", "created_at")
    search_fields = ("name", "city", "address")
    inlines = [RoomInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("room_number", "hotel", "room_type", "nightly_rate", "max_adults", "max_children", "is_available")
    list_filter = ("room_type", "is_available", "hotel")
    search_fields = ("room_number", "hotel__name")
