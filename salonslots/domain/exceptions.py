"""
Domain-specific exception hierarchy for the salon slot finder.
"""


class SalonSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidArgument(SalonSlotsError, ValueError):
    """Raised when a duration, window or day cannot be used for a calculation."""


class BookingStoreError(SalonSlotsError):
    """Raised when appointment data cannot be fetched or parsed."""
