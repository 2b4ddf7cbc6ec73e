"""
Tests for domain models.
"""

from datetime import date, datetime, time

import pendulum
import pytest
from pendulum import DateTime

from salonslots.domain.exceptions import InvalidArgument
from salonslots.domain.models import (
    AppointmentRecord,
    BookedInterval,
    BusinessHours,
    BusinessWindow,
    CandidateSlot,
    Service,
)

TZ = "Europe/Madrid"


def at(hour: int, minute: int = 0) -> DateTime:
    return pendulum.datetime(2026, 10, 19, hour, minute, tz=TZ)


class TestService:
    """Tests for Service model."""

    def test_create_valid_service(self):
        """Test creating a valid service."""
        service = Service(id="tinte", name="Tinte", total_duration=90, active_duration=30, default_price=45)

        assert service.total_duration == 90
        assert service.active_duration == 30

    def test_active_longer_than_total_rejected(self):
        """Test that active_duration above total_duration is rejected."""
        with pytest.raises(InvalidArgument, match="exceeds total_duration"):
            Service(id="x", name="X", total_duration=30, active_duration=45)

    def test_non_positive_durations_rejected(self):
        """Test that zero durations are rejected."""
        with pytest.raises(InvalidArgument):
            Service(id="x", name="X", total_duration=0, active_duration=0)

    def test_negative_price_rejected(self):
        """Test that a negative price is rejected."""
        with pytest.raises(InvalidArgument):
            Service(id="x", name="X", total_duration=30, active_duration=30, default_price=-1)


class TestBookedInterval:
    """Tests for BookedInterval model."""

    def test_from_appointment_without_active_duration(self):
        """The whole appointment blocks when the active duration is unknown."""
        interval = BookedInterval.from_appointment(at(10, 0), at(10, 45), None)

        assert interval.start == at(10, 0)
        assert interval.active_end == at(10, 45)

    def test_from_appointment_with_active_duration(self):
        """Only the active part blocks when known."""
        interval = BookedInterval.from_appointment(at(9, 0), at(10, 0), 15)

        assert interval.active_end == at(9, 15)

    def test_from_appointment_clamps_active_to_total(self):
        """An active duration longer than the appointment is clamped."""
        interval = BookedInterval.from_appointment(at(9, 0), at(9, 30), 60)

        assert interval.active_end == at(9, 30)

    def test_from_appointment_with_zero_active_duration(self):
        """A zero active duration gives an empty interval at the start."""
        interval = BookedInterval.from_appointment(at(9, 0), at(9, 30), 0)

        assert interval.active_end == interval.start == at(9, 0)
        assert not interval.overlaps(at(9, 0), at(9, 30))
        assert interval.overlaps(at(8, 45), at(9, 15))

    def test_from_appointment_negative_active_duration_is_empty(self):
        """Negative active durations are raised to zero."""
        interval = BookedInterval.from_appointment(at(9, 0), at(9, 30), -10)

        assert interval.active_end == at(9, 0)

    def test_start_after_active_end_rejected(self):
        """An interval ending before it starts is rejected."""
        with pytest.raises(InvalidArgument, match="must not be after"):
            BookedInterval(start=at(10, 0), active_end=at(9, 45))

    def test_naive_instants_rejected(self):
        """Naive datetimes are rejected."""
        with pytest.raises(InvalidArgument):
            BookedInterval(start=datetime(2026, 10, 19, 9, 0), active_end=datetime(2026, 10, 19, 9, 30))

    def test_overlaps_is_half_open(self):
        """Touching intervals do not overlap."""
        interval = BookedInterval(start=at(10, 0), active_end=at(10, 30))

        assert interval.overlaps(at(9, 45), at(10, 15))
        assert interval.overlaps(at(10, 15), at(10, 20))
        assert not interval.overlaps(at(9, 30), at(10, 0))
        assert not interval.overlaps(at(10, 30), at(11, 0))


class TestCandidateSlot:
    """Tests for CandidateSlot model."""

    def test_end_and_active_end(self):
        """Test derived end instants."""
        slot = CandidateSlot(start=at(11, 0), total_duration=90, active_duration=30)

        assert slot.end == at(12, 30)
        assert slot.active_end == at(11, 30)

    def test_format_display(self):
        """Test display formatting."""
        slot = CandidateSlot(start=at(11, 0), total_duration=90, active_duration=30)

        assert slot.label() == "11:00"
        assert slot.format_display() == "11:00 – 12:30 (activo hasta 11:30)"


class TestBusinessWindow:
    """Tests for BusinessWindow model."""

    def test_default_hours(self):
        """Default window runs 09:00 to 20:00 local time."""
        window = BusinessWindow(day=date(2026, 10, 19))

        assert window.opens_at() == at(9, 0)
        assert window.closes_at() == at(20, 0)

    def test_close_before_open_rejected(self):
        """Test that a window closing before it opens is rejected."""
        with pytest.raises(InvalidArgument, match="must be after open time"):
            BusinessWindow(day=date(2026, 10, 19), open_time=time(20, 0), close_time=time(9, 0))

    def test_close_equal_open_rejected(self):
        """Test that an empty window is rejected."""
        with pytest.raises(InvalidArgument):
            BusinessWindow(day=date(2026, 10, 19), open_time=time(9, 0), close_time=time(9, 0))

    def test_datetime_day_rejected(self):
        """A datetime is not a calendar day."""
        with pytest.raises(InvalidArgument, match="calendar date"):
            BusinessWindow(day=at(9, 0))

    def test_unknown_timezone_rejected(self):
        """Test that an unknown timezone is rejected."""
        with pytest.raises(InvalidArgument, match="Unknown timezone"):
            BusinessWindow(day=date(2026, 10, 19), timezone="Mars/Olympus_Mons")

    def test_is_same_day_uses_local_date(self):
        """A UTC instant late in the evening belongs to the next local day."""
        window = BusinessWindow(day=date(2026, 10, 19))

        assert window.is_same_day(pendulum.datetime(2026, 10, 18, 23, 30, tz="UTC"))
        assert not window.is_same_day(pendulum.datetime(2026, 10, 19, 22, 30, tz="UTC"))


class TestBusinessHours:
    """Tests for BusinessHours model."""

    def test_window_for_open_day(self):
        """Test getting the window for a regular day."""
        hours = BusinessHours(open_time=time(10, 0), close_time=time(19, 0), closed_weekdays=[6])

        window = hours.window_for(date(2026, 10, 19))

        assert window is not None
        assert window.open_time == time(10, 0)
        assert window.close_time == time(19, 0)

    def test_window_for_closed_weekday(self):
        """Test that a closed weekday has no window."""
        hours = BusinessHours(closed_weekdays=[6])

        assert hours.window_for(date(2026, 10, 18)) is None  # Sunday

    def test_window_for_holiday(self):
        """Test that a holiday has no window."""
        hours = BusinessHours(holidays=[date(2026, 12, 25)])

        assert hours.window_for(date(2026, 12, 25)) is None
        assert hours.window_for(date(2026, 12, 24)) is not None


class TestAppointmentRecord:
    """Tests for AppointmentRecord model."""

    def test_to_booked_interval(self):
        """Test conversion to a blocking interval."""
        record = AppointmentRecord(
            id="1", start=at(9, 0), end=at(10, 0), service_active_duration=20
        )

        assert record.to_booked_interval() == BookedInterval(start=at(9, 0), active_end=at(9, 20))

    def test_format_display_uses_fallback_titles(self):
        """Missing client and service names get placeholders."""
        record = AppointmentRecord(id="1", start=at(9, 0), end=at(9, 30))

        assert record.format_display(TZ) == "09:00 – 09:30 Cliente · Servicio [reserved]"

    def test_format_display_converts_to_local_time(self):
        """UTC instants are shown as salon wall-clock times."""
        record = AppointmentRecord(
            id="2",
            start=pendulum.datetime(2026, 10, 19, 8, 0, tz="UTC"),
            end=pendulum.datetime(2026, 10, 19, 8, 45, tz="UTC"),
            client_name="Lucía",
            service_name="Corte",
        )

        assert record.format_display(TZ) == "10:00 – 10:45 Lucía · Corte [reserved]"
