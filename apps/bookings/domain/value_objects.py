"""Booking-specific value objects."""

from dataclasses import dataclass
from enum import Enum

from shared.domain.base import ValueObject


class PaymentMethod(Enum):
    """How the guest pays; only informs the initial booking status"""
    CREDIT_CARD = 'credit_card'
    BANK_TRANSFER = 'bank_transfer'
    CASH = 'cash'
    TELEBIRR = 'telebirr'


@dataclass(frozen=True)
class Guests(ValueObject):
    """Party size of a booking"""
    adults: int = 1
    children: int = 0

    def __post_init__(self):
        if self.adults < 1:
            raise ValueError("At least one adult is required")
        if self.children < 0:
            raise ValueError("Children count cannot be negative")

    @property
    def total(self) -> int:
        return self.adults + self.children


@dataclass(frozen=True)
class BookingDetails(ValueObject):
    """
    Customer-facing data recorded with a booking

    None of these fields influence availability or pricing.
    """
    customer_name: str = ''
    customer_email: str = ''
    customer_id_number: str = ''
    special_requests: str = ''
    payment_method: PaymentMethod = PaymentMethod.CASH
