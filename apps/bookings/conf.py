"""Engine settings, read from ``settings.BOOKINGS`` with defaults."""

from __future__ import annotations

from typing import Any

from django.conf import settings  # type: ignore

DEFAULTS = {
    "HORIZON_DAYS": 90,
    "LOCK_TIMEOUT": 10.0,
    "AVAILABILITY_CACHE_TTL": 30,
    "AVAILABILITY_CACHE_PREFIX": "bookings:room",
    "ALLOW_BACKDATED_STAFF_BOOKINGS": True,
}


def booking_setting(name: str) -> Any:
    return getattr(settings, "BOOKINGS", {}).get(name, DEFAULTS[name])
