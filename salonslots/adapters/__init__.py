"""
Adapters layer - Booking stores over the hosted backend and its JSON exports.
"""

from .booking_store import JsonBookingStore, parse_appointment_row
from .rest_client import RestBookingStore

__all__ = ["JsonBookingStore", "RestBookingStore", "parse_appointment_row"]
