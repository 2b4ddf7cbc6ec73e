"""
Domain models for salon services, bookings and candidate appointment slots.

All instants are timezone-aware pendulum ``DateTime`` objects. A "day" is
always a local calendar date in the salon's timezone, never a UTC date.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidArgument

DEFAULT_TIMEZONE = "Europe/Madrid"
DEFAULT_OPEN_TIME = time(9, 0)
DEFAULT_CLOSE_TIME = time(20, 0)


def get_zone(name: str):
    """Resolve an IANA timezone name, raising InvalidArgument if unknown."""
    try:
        return pendulum.timezone(name)
    except ValueError as exc:
        raise InvalidArgument(f"Unknown timezone: {name!r}") from exc


def ensure_day(day: object) -> Date:
    """Validate that ``day`` is a plain calendar date (not a datetime)."""
    if isinstance(day, datetime) or not isinstance(day, date):
        raise InvalidArgument(f"day must be a calendar date, got {day!r}")
    return pendulum.date(day.year, day.month, day.day)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Return the whole number of minutes between two instants."""
    return round((end - start).total_seconds() / 60)


@dataclass(frozen=True)
class Service:
    """
    An entry of the salon's service catalog.

    Invariant: 0 < active_duration <= total_duration, default_price >= 0.
    """
    id: str
    name: str
    total_duration: int
    active_duration: int
    default_price: float = 0.0

    def __post_init__(self):
        if self.total_duration <= 0:
            raise InvalidArgument(
                f"total_duration must be positive, got {self.total_duration} for {self.name!r}"
            )
        if self.active_duration <= 0:
            raise InvalidArgument(
                f"active_duration must be positive, got {self.active_duration} for {self.name!r}"
            )
        if self.active_duration > self.total_duration:
            raise InvalidArgument(
                f"active_duration ({self.active_duration}) exceeds total_duration "
                f"({self.total_duration}) for {self.name!r}"
            )
        if self.default_price < 0:
            raise InvalidArgument(f"default_price must not be negative for {self.name!r}")


@dataclass(frozen=True)
class BookedInterval:
    """
    The resource-blocking part of an existing appointment: [start, active_end).

    Invariant: start <= active_end. A zero-length interval only blocks
    candidates that straddle its start.
    """
    start: DateTime
    active_end: DateTime

    def __post_init__(self):
        if self.start.tzinfo is None or self.active_end.tzinfo is None:
            raise InvalidArgument("Booked intervals need timezone-aware instants")
        if self.start > self.active_end:
            raise InvalidArgument(
                f"Booking start {self.start} must not be after its active end {self.active_end}"
            )

    @classmethod
    def from_appointment(
        cls,
        start: DateTime,
        end: DateTime,
        active_duration: Optional[int] = None,
    ) -> "BookedInterval":
        """
        Derive the blocking interval of an appointment.

        Without a known active duration the whole appointment blocks.
        """
        start = pendulum.instance(start)
        total = max(1, duration_minutes(start, end))
        active = total if active_duration is None else active_duration
        active = max(0, min(active, total))
        return cls(start=start, active_end=start.add(minutes=active))

    def overlaps(self, start: DateTime, active_end: DateTime) -> bool:
        """Half-open overlap test; touching endpoints do not overlap."""
        return start < self.active_end and active_end > self.start


@dataclass(frozen=True)
class CandidateSlot:
    """A prospective start time for a new booking."""
    start: DateTime
    total_duration: int
    active_duration: int

    @property
    def end(self) -> DateTime:
        return self.start.add(minutes=self.total_duration)

    @property
    def active_end(self) -> DateTime:
        return self.start.add(minutes=self.active_duration)

    def label(self) -> str:
        return self.start.format("HH:mm")

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: HH:mm – HH:mm (activo hasta HH:mm)
        """
        return (
            f"{self.label()} – {self.end.format('HH:mm')} "
            f"(activo hasta {self.active_end.format('HH:mm')})"
        )


@dataclass(frozen=True)
class BusinessWindow:
    """
    Opening hours of the salon on one local calendar day.

    Invariant: open_time is before close_time.
    """
    day: Date
    open_time: time = DEFAULT_OPEN_TIME
    close_time: time = DEFAULT_CLOSE_TIME
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self):
        object.__setattr__(self, "day", ensure_day(self.day))
        if not isinstance(self.open_time, time) or not isinstance(self.close_time, time):
            raise InvalidArgument("open_time and close_time must be wall-clock times")
        if self.close_time <= self.open_time:
            raise InvalidArgument(
                f"Close time {self.close_time} must be after open time {self.open_time}"
            )
        get_zone(self.timezone)

    def _start_of_day(self) -> DateTime:
        return pendulum.datetime(self.day.year, self.day.month, self.day.day, tz=self.timezone)

    def opens_at(self) -> DateTime:
        return self._start_of_day().set(
            hour=self.open_time.hour,
            minute=self.open_time.minute,
        )

    def closes_at(self) -> DateTime:
        return self._start_of_day().set(
            hour=self.close_time.hour,
            minute=self.close_time.minute,
        )

    def is_same_day(self, instant: datetime) -> bool:
        """Check whether an instant falls on this window's local calendar day."""
        return pendulum.instance(instant).in_timezone(self.timezone).date() == self.day


@dataclass
class BusinessHours:
    """
    Weekly opening configuration for the salon.
    """
    open_time: time = DEFAULT_OPEN_TIME
    close_time: time = DEFAULT_CLOSE_TIME
    timezone: str = DEFAULT_TIMEZONE
    closed_weekdays: List[int] = field(default_factory=list)  # 0=Monday, 6=Sunday
    holidays: List[date] = field(default_factory=list)

    def is_open_on(self, day: date) -> bool:
        """Check whether the salon opens on a given day."""
        local_day = ensure_day(day)
        return local_day.day_of_week not in self.closed_weekdays and local_day not in self.holidays

    def window_for(self, day: date) -> BusinessWindow | None:
        """
        Get the business window for a specific day.
        Returns None if the salon is closed that day.
        """
        if not self.is_open_on(day):
            return None

        return BusinessWindow(
            day=day,
            open_time=self.open_time,
            close_time=self.close_time,
            timezone=self.timezone,
        )


@dataclass(frozen=True)
class AppointmentRecord:
    """
    An appointment row as read from the booking store.
    """
    id: str
    start: DateTime
    end: DateTime
    status: str = "reserved"
    client_name: Optional[str] = None
    service_name: Optional[str] = None
    service_active_duration: Optional[int] = None

    def to_booked_interval(self) -> BookedInterval:
        return BookedInterval.from_appointment(
            self.start, self.end, self.service_active_duration
        )

    def format_display(self, timezone: str) -> str:
        start = self.start.in_timezone(timezone)
        end = self.end.in_timezone(timezone)
        title = f"{self.client_name or 'Cliente'} · {self.service_name or 'Servicio'}"
        return f"{start.format('HH:mm')} – {end.format('HH:mm')} {title} [{self.status}]"
