"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BookingViewSet, RoomAvailabilityView

router = DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
    path(
        "rooms/<uuid:room_id>/availability/",
        RoomAvailabilityView.as_view(),
        name="room-availability",
    ),
]
