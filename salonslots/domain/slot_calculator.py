"""
Core business logic for calculating free appointment start times.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Each call is independent and holds no state.
"""

import logging
from typing import Iterable, List, Tuple

from pendulum import DateTime

from .exceptions import InvalidArgument
from .models import BookedInterval, BusinessWindow, CandidateSlot

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY_MINUTES = 15


class SlotAvailabilityCalculator:
    """
    Calculates the free start times for a service on one day.

    Algorithm:
    1. Step through the business window at the configured granularity,
       keeping starts whose total duration still ends by closing time
    2. Clamp the active duration to the total duration
    3. Drop candidates whose active interval overlaps any booking's
       active interval (half-open, so touching endpoints are fine)
    4. Return the remaining candidates in ascending order

    Only the active part of a new booking is checked against other bookings.
    The passive tail after active_end may run into a later booking.
    """

    def __init__(self, granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES):
        if granularity_minutes <= 0:
            raise InvalidArgument(
                f"granularity_minutes must be positive, got {granularity_minutes}"
            )
        self.granularity_minutes = granularity_minutes

    def find_available_slots(
        self,
        window: BusinessWindow,
        bookings: Iterable[BookedInterval],
        total_duration: int,
        active_duration: int,
    ) -> List[CandidateSlot]:
        """
        Find every free slot for a service in the business window.

        Args:
            window: Opening hours of the day to check
            bookings: Active intervals of existing appointments
            total_duration: Full length of the new appointment in minutes
            active_duration: Minutes the stylist is occupied; clamped to total_duration

        Returns:
            CandidateSlot objects in ascending start order

        Raises:
            InvalidArgument: If a duration is not positive
        """
        total, active = self._clamp_durations(total_duration, active_duration)
        busy = list(bookings)

        slots: List[CandidateSlot] = []

        for start in self._candidate_starts(window, total):
            slot = CandidateSlot(start=start, total_duration=total, active_duration=active)
            if self._is_free(slot, busy):
                slots.append(slot)

        logger.debug(
            "%d free slot(s) on %s for %d/%d min against %d booking(s)",
            len(slots), window.day, total, active, len(busy),
        )
        return slots

    def find_available_start_times(
        self,
        window: BusinessWindow,
        bookings: Iterable[BookedInterval],
        total_duration: int,
        active_duration: int,
    ) -> List[DateTime]:
        """Same as find_available_slots, returning only the start instants."""
        return [
            slot.start
            for slot in self.find_available_slots(
                window, bookings, total_duration, active_duration
            )
        ]

    @staticmethod
    def _clamp_durations(total_duration: int, active_duration: int) -> Tuple[int, int]:
        if total_duration <= 0:
            raise InvalidArgument(f"total_duration must be positive, got {total_duration}")
        if active_duration <= 0:
            raise InvalidArgument(f"active_duration must be positive, got {active_duration}")

        return total_duration, min(active_duration, total_duration)

    def _candidate_starts(self, window: BusinessWindow, total: int) -> List[DateTime]:
        """
        Generate granularity-aligned starts from opening time whose total
        duration ends no later than closing time.
        """
        starts: List[DateTime] = []
        closes = window.closes_at()

        current = window.opens_at()
        while current.add(minutes=total) <= closes:
            starts.append(current)
            current = current.add(minutes=self.granularity_minutes)

        return starts

    @staticmethod
    def _is_free(slot: CandidateSlot, bookings: List[BookedInterval]) -> bool:
        active_end = slot.active_end
        return not any(booking.overlaps(slot.start, active_end) for booking in bookings)
