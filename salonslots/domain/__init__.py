"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import BookingStoreError, InvalidArgument, SalonSlotsError
from .models import (
    AppointmentRecord,
    BookedInterval,
    BusinessHours,
    BusinessWindow,
    CandidateSlot,
    Service,
)
from .slot_calculator import SlotAvailabilityCalculator

__all__ = [
    "AppointmentRecord",
    "BookedInterval",
    "BookingStoreError",
    "BusinessHours",
    "BusinessWindow",
    "CandidateSlot",
    "InvalidArgument",
    "SalonSlotsError",
    "Service",
    "SlotAvailabilityCalculator",
]
