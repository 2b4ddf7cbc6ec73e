"""
Application service for finding free appointment start times.

The service fetches a day's appointments through a booking store adapter
and delegates the slot calculation to the domain-level
``SlotAvailabilityCalculator``. The store is a simple protocol so tests can
plug in a stub instead of the hosted backend.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Protocol

from ..domain.models import (
    AppointmentRecord,
    BookedInterval,
    BusinessHours,
    CandidateSlot,
    Service,
    ensure_day,
)
from ..domain.slot_calculator import SlotAvailabilityCalculator

logger = logging.getLogger(__name__)


class BookingStoreProtocol(Protocol):
    """Protocol describing the booking store behaviour needed by the service."""

    def get_appointments(self, day: date, timezone: str) -> List[AppointmentRecord]:
        """Return the appointments starting on a local calendar day."""


class AvailabilityService:
    """
    Orchestrates appointment retrieval and slot calculation for one salon.
    """

    def __init__(
        self,
        booking_store: BookingStoreProtocol,
        slot_calculator: SlotAvailabilityCalculator,
        business_hours: BusinessHours,
        non_blocking_statuses: Iterable[str] = (),
    ) -> None:
        self._booking_store = booking_store
        self._slot_calculator = slot_calculator
        self._business_hours = business_hours
        self._non_blocking_statuses = frozenset(s.lower() for s in non_blocking_statuses)

    def find_slots(
        self,
        *,
        day: date,
        total_duration: int,
        active_duration: int,
    ) -> List[CandidateSlot]:
        """
        Retrieve the day's bookings and compute the free slots.

        Closed days yield an empty list without touching the store.
        """
        ensure_day(day)
        window = self._business_hours.window_for(day)
        if window is None:
            logger.info("Salon closed on %s, no slots offered", day)
            return []

        bookings = self.fetch_booked_intervals(day=day)

        return self._slot_calculator.find_available_slots(
            window=window,
            bookings=bookings,
            total_duration=total_duration,
            active_duration=active_duration,
        )

    def find_slots_for_service(self, *, day: date, service: Service) -> List[CandidateSlot]:
        """Compute the free slots for a catalog service."""
        return self.find_slots(
            day=day,
            total_duration=service.total_duration,
            active_duration=service.active_duration,
        )

    def fetch_appointments(self, *, day: date) -> List[AppointmentRecord]:
        """Fetch the appointments starting on the given local day."""
        return self._booking_store.get_appointments(day, self._business_hours.timezone)

    def fetch_booked_intervals(self, *, day: date) -> List[BookedInterval]:
        """Fetch the blocking intervals of the day's appointments."""
        return [
            record.to_booked_interval()
            for record in self.fetch_appointments(day=day)
            if record.status.lower() not in self._non_blocking_statuses
        ]
