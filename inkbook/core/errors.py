"""
Exception taxonomy for booking and scheduling.

"Fully booked" is not an error: the artist resolver returns None and only the
booking layer turns that into SlotUnavailable.
"""
from typing import Optional


class BookingError(Exception):
    """Base class for domain errors. ``code`` is a stable machine-readable tag."""

    code = "booking_error"

    def __init__(self, message: str = "", *, code: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code


class RepositoryError(BookingError):
    code = "repository_error"


class RepositoryUnavailable(RepositoryError):
    """The appointment store could not be queried or written."""

    code = "repository_unavailable"


class RepositoryTimeout(RepositoryError):
    """The appointment store did not answer within the configured timeout."""

    code = "repository_timeout"


class ArtistNotFound(BookingError):
    code = "artist_not_found"


class AppointmentNotFound(BookingError):
    code = "appointment_not_found"


class UnknownService(BookingError):
    code = "unknown_service"


class SlotUnavailable(BookingError):
    code = "slot_unavailable"


class InvalidStatusTransition(BookingError):
    code = "invalid_status_transition"


class CancellationRejected(BookingError):
    """Token cancellation refused.

    ``code`` is one of NOT_FOUND, INVALID_TOKEN, ALREADY_CANCELLED,
    ALREADY_COMPLETED, TOO_LATE.
    """

    code = "UNKNOWN"
