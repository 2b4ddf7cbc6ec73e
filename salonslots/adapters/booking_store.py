"""
Booking store backed by a JSON export of the appointments table.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import BookingStoreError
from ..domain.models import AppointmentRecord

logger = logging.getLogger(__name__)


def parse_datetime(datetime_str: str, timezone: str) -> DateTime:
    """
    Parse a datetime string to a pendulum DateTime in the given timezone.

    Naive values are read as local wall-clock time of that timezone.
    """
    dt = pendulum.parse(datetime_str, tz=timezone)

    if isinstance(dt, DateTime):
        return dt.in_timezone(timezone)

    raise ValueError(f"Could not parse datetime: {datetime_str}")


def parse_appointment_row(row: Dict[str, Any], timezone: str) -> Optional[AppointmentRecord]:
    """
    Convert a backend appointment row into an AppointmentRecord.

    Row format:
    {
        "id": "...",
        "start_time": "2026-10-19T08:00:00+00:00",
        "end_time": "2026-10-19T08:30:00+00:00",
        "status": "reserved",
        "clients": {"full_name": "..."},
        "services": {"name": "...", "active_duration_min": 15}
    }

    Returns None (and logs a warning) for rows that cannot be parsed.
    """
    try:
        start = parse_datetime(row["start_time"], timezone)
        end = parse_datetime(row["end_time"], timezone)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Skipping appointment row %s: %s", row.get("id"), exc)
        return None

    if end <= start:
        logger.warning("Skipping appointment row %s: end is not after start", row.get("id"))
        return None

    service = row.get("services") or {}
    client = row.get("clients") or {}
    if not isinstance(service, dict) or not isinstance(client, dict):
        logger.warning("Skipping appointment row %s: malformed service or client", row.get("id"))
        return None

    active = service.get("active_duration_min")
    try:
        active_duration = int(active) if active is not None else None
    except (TypeError, ValueError) as exc:
        logger.warning("Skipping appointment row %s: bad active duration: %s", row.get("id"), exc)
        return None

    return AppointmentRecord(
        id=str(row.get("id", "")),
        start=start,
        end=end,
        status=str(row.get("status") or "reserved").lower(),
        client_name=client.get("full_name"),
        service_name=service.get("name"),
        service_active_duration=active_duration,
    )


class JsonBookingStore:
    """
    Read-only store over a JSON file holding a list of appointment rows.

    A missing file is treated as an empty agenda.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load_rows(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            logger.warning("Bookings file %s not found, assuming no appointments", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BookingStoreError(f"Could not read bookings from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise BookingStoreError(f"Bookings file {self.path} must contain a list of rows")

        return data

    def get_appointments(self, day: date, timezone: str) -> List[AppointmentRecord]:
        """
        Load the appointments that start on a local calendar day.

        Args:
            day: Local calendar date
            timezone: IANA timezone identifier of the salon

        Returns:
            AppointmentRecord objects sorted by start time
        """
        records: List[AppointmentRecord] = []

        for row in self._load_rows():
            if not isinstance(row, dict):
                logger.warning("Skipping non-object appointment row: %r", row)
                continue
            record = parse_appointment_row(row, timezone)
            if record is not None and record.start.date() == day:
                records.append(record)

        return sorted(records, key=lambda r: r.start)
