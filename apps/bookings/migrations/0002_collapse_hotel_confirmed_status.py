"""Fold the legacy "confirmed by Hotel" status into "confirmed".

Imported data may carry the old value; it blocks dates exactly like a
confirmed booking, so it is rewritten rather than kept as a fifth status.
"""

from django.db import migrations

LEGACY_STATUSES = ("confirmed by Hotel", "confirmed_by_hotel")


def collapse_legacy_status(apps, schema_editor):
    Booking = apps.get_model("bookings", "Booking")
    Booking.objects.filter(status__in=LEGACY_STATUSES).update(status="confirmed")


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(collapse_legacy_status, migrations.RunPython.noop),
    ]
