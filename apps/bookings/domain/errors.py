"""Domain errors raised by the reservation engine.

Every error carries an ``ErrorCode`` and a user-safe message. The API layer
maps codes to HTTP statuses; nothing here knows about presentation.
"""

from __future__ import annotations

from datetime import date
from enum import Enum


class ErrorCode(Enum):
    INVALID_RANGE = "INVALID_RANGE"
    PAST_DATE = "PAST_DATE"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    GUEST_LIMIT_EXCEEDED = "GUEST_LIMIT_EXCEEDED"


class BookingError(Exception):
    """Base error with code and user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRange(BookingError):
    code = ErrorCode.INVALID_RANGE

    def __init__(self, check_in: date, check_out: date) -> None:
        super().__init__("Check-out date must be after check-in date")
        self.check_in = check_in
        self.check_out = check_out


class PastDate(BookingError):
    code = ErrorCode.PAST_DATE

    def __init__(self, check_in: date, today: date) -> None:
        super().__init__("Check-in date cannot be in the past")
        self.check_in = check_in
        self.today = today


class RoomUnavailable(BookingError):
    """Raised when the requested nights collide with a confirmed booking."""

    code = ErrorCode.ROOM_UNAVAILABLE

    def __init__(self, first_conflicting_date: date, booking_id=None) -> None:
        super().__init__(f"Room is already booked on {first_conflicting_date.isoformat()}")
        self.first_conflicting_date = first_conflicting_date
        self.booking_id = booking_id


class InvalidTransition(BookingError):
    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, current: str, target: str, reason: str = "") -> None:
        message = f"Cannot move booking from {current} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.target = target


class NotFound(BookingError):
    code = ErrorCode.NOT_FOUND

    def __init__(self, kind: str, identifier) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.identifier = identifier


class StorageFailure(BookingError):
    """Collaborator I/O failed; the caller may retry."""

    code = ErrorCode.STORAGE_FAILURE

    def __init__(self, message: str = "Booking storage is unavailable") -> None:
        super().__init__(message)


class GuestLimitExceeded(BookingError):
    code = ErrorCode.GUEST_LIMIT_EXCEEDED

    def __init__(self, adults: int, children: int, max_adults: int, max_children: int) -> None:
        super().__init__(
            f"Room fits {max_adults} adult(s) and {max_children} child(ren), "
            f"requested {adults} and {children}"
        )
        self.max_adults = max_adults
        self.max_children = max_children
