"""Hotel and room models.

Rooms carry the nightly rate and guest capacity the reservation engine
prices and validates against.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Hotel(models.Model):
    """Hotel managed by a hotel manager."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=120, blank=True)
    manager = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="managed_hotels",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hotel")
        verbose_name_plural = _("Hotels")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Room(models.Model):
    """Bookable room of a hotel."""

    class RoomType(models.TextChoices):
        SINGLE = "single", _("Single")
        DOUBLE = "double", _("Double")
        SUITE = "suite", _("Suite")
        DELUXE = "deluxe", _("Deluxe")
        FAMILY = "family", _("Family")
        EXECUTIVE = "executive", _("Executive")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="rooms")
    room_number = models.CharField(max_length=20)
    room_type = models.CharField(max_length=20, choices=RoomType.choices, default=RoomType.DOUBLE)
    description = models.TextField(blank=True)
    nightly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    max_adults = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    max_children = models.PositiveSmallIntegerField(default=0)
    is_available = models.BooleanField(
        default=True,
        help_text=_("Rooms out of service cannot be booked for any date."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["hotel", "room_number"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "room_number"], name="room_unique_number_per_hotel"),
            models.CheckConstraint(
                condition=models.Q(nightly_rate__gt=0),
                name="room_positive_nightly_rate",
            ),
        ]
        indexes = [
            models.Index(fields=["room_type", "nightly_rate"], name="hotels_room_room_ty_2f1c3e_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.hotel.name} #{self.room_number}"
