"""Stay pricing."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal

from shared.domain.value_objects import Money

SECONDS_PER_DAY = 24 * 60 * 60


def count_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """Nights between the two instants, rounded up, never less than one."""
    span = check_out - check_in
    nights = math.ceil(span.total_seconds() / SECONDS_PER_DAY)
    return max(nights, 1)


def calculate_total(nightly_rate: Decimal | Money, check_in: date, check_out: date) -> Money:
    """Return ``nightly_rate * nights`` for the stay."""
    rate = nightly_rate.amount if isinstance(nightly_rate, Money) else Decimal(str(nightly_rate))
    if rate <= 0:
        raise ValueError("Nightly rate must be positive")
    return Money(rate) * count_nights(check_in, check_out)
