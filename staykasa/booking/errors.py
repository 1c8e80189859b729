"""Booking engine error taxonomy.

Every rejection the engine can produce is a distinct subclass so callers
(routes, scripts, tests) can tell "these dates are taken" apart from "too
many guests". ``code`` is the stable machine-readable kind and
``status_code`` the HTTP status the API renders it with.
"""

from fastapi import status


class BookingError(Exception):
    """Base class for expected, caller-actionable booking failures."""

    code: str = "booking_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Booking request rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRange(BookingError):
    code = "invalid_range"
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_message = "check_out must be after check_in"


class CapacityExceeded(BookingError):
    code = "capacity_exceeded"
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_message = "Guest count exceeds the property's capacity"


class PropertyUnavailable(BookingError):
    code = "property_unavailable"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Property is not available for booking"


class DateConflict(BookingError):
    code = "date_conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Property is not available for the selected dates"


class NotFound(BookingError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Forbidden(BookingError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class InvalidTransition(BookingError):
    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking status transition not allowed"


class PersistenceError(BookingError):
    """Infrastructure failure while reading or writing bookings.

    Not a business rejection; rendered as a generic internal error.
    """

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
