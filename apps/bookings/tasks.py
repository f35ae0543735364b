"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .domain.errors import BookingError
from .models import Booking
from .services import build_reservation_service

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Complete confirmed bookings whose check-out day has come.

    Runs hourly. A booking that fails is logged and retried on the next
    run; the others are still processed.

    Returns:
        dict: {"completed": number of completed bookings}
    """
    today = timezone.localdate()
    completed_count = 0
    service = build_reservation_service()

    booking_ids = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        check_out__lte=today,
    ).values_list("id", flat=True)

    for booking_id in list(booking_ids):
        try:
            booking = service.complete_booking(booking_id)
            completed_count += 1
            logger.info(f"Booking {booking.booking_number} completed")
        except BookingError as e:
            logger.error(f"Error completing booking {booking_id}: {e}", exc_info=True)

    if completed_count > 0:
        logger.info(f"Completed {completed_count} bookings")

    return {"completed": completed_count}
