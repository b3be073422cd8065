"""
Custom exception classes for the Vehicle Rental booking API.

These exceptions provide precise error types that controllers can catch
(or let the app-level handler translate) to render a stable JSON message
and status code instead of generic 500 errors.
"""


class BookingError(Exception):
    """Base class for every expected failure of the booking API."""

    status_code = 500
    default_message = "Error: request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @property
    def public_message(self) -> str:
        """The client-facing message. Always the fixed default for the class."""
        return self.default_message


class NotFoundError(BookingError):
    """Raised when a vehicle, booking or payment ID cannot be found."""

    status_code = 404
    default_message = "Error: resource not found"


class InvalidRangeError(BookingError):
    """Raised when start >= end, a date is malformed, or a date lies in the past."""

    status_code = 400
    default_message = "Error: invalid date range"


class InvalidPricingError(BookingError):
    """Raised when a vehicle's daily rate is not a positive finite number."""

    status_code = 400
    default_message = "Error: vehicle pricing is unavailable"


class ConflictError(BookingError):
    """Raised when an active booking already holds part of the requested range."""

    status_code = 409
    default_message = "Error: request conflicts with an existing booking"

    def __init__(self, message: str | None = None, conflicts=None) -> None:
        super().__init__(message)
        self.conflicts = list(conflicts or [])


class ForbiddenError(BookingError):
    """Raised when the acting user has no rights over the resource."""

    status_code = 403
    default_message = "Error: you do not have access to this resource"


class InvalidStateError(BookingError):
    """Raised on an illegal booking/payment status transition."""

    status_code = 409
    default_message = "Error: operation not allowed in the current state"


class StorageTimeoutError(BookingError):
    """Raised when the store cannot be reached within the configured timeout."""

    status_code = 503
    default_message = "Error: service temporarily unavailable"


class ValidationError(BookingError):
    """Raised when a request payload is missing fields or carries bad values."""

    status_code = 400
    default_message = "Error: invalid request"

    @property
    def public_message(self) -> str:
        # field-level messages are written for clients
        return self.message


class AuthenticationError(BookingError):
    """Raised when credentials are missing or wrong."""

    status_code = 401
    default_message = "Error: authentication required"
