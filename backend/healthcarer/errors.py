# backend/healthcarer/errors.py
"""
Error taxonomy for slot operations.

ValidationError        : caller input rejected before any store access
SlotUnavailable        : book on a slot that is not Free (or does not exist)
NoActiveBooking        : cancel on a slot that is not Booked
StoreConnectivityError : store unreachable, throttled or misbehaving

The first three are business outcomes and are never retried.
StoreConnectivityError may be retried by the caller.
"""


class BookingError(Exception):
    """Base class for slot operation errors."""

    message = "Booking operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(BookingError):
    message = "Invalid request"


class SlotUnavailable(BookingError):
    message = "Time slot is already booked or does not exist"


class NoActiveBooking(BookingError):
    message = "No booking found for this time slot"


class StoreConnectivityError(BookingError):
    message = "Slot store is unavailable"
