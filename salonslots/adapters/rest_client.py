"""
Read-only client for the hosted backend's REST table API.
"""

import logging
from datetime import date
from typing import Any, List

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import BookingStoreError
from ..domain.models import AppointmentRecord
from .booking_store import parse_appointment_row

logger = logging.getLogger(__name__)


class RestBookingStore:
    """
    Fetches appointment rows for one day from the backend's REST endpoint.

    Uses ``GET /rest/v1/<table>`` with the service's active duration joined
    in, so bookings block only their active portion.
    """

    SELECT = (
        "id,start_time,end_time,status,"
        "clients(full_name),services(name,active_duration_min)"
    )

    def __init__(self, base_url: str, api_key: str, table: str = "appointments", timeout: int = 30):
        """
        Initialize the REST client.

        Args:
            base_url: Project URL of the hosted backend
            api_key: API key sent as ``apikey`` and bearer token
            table: Name of the appointments table
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

    def _day_bounds_utc(self, day: date, timezone: str) -> tuple[DateTime, DateTime]:
        start = pendulum.datetime(day.year, day.month, day.day, tz=timezone)
        end = start.add(days=1)
        return start.in_timezone("UTC"), end.in_timezone("UTC")

    def get_appointments(self, day: date, timezone: str) -> List[AppointmentRecord]:
        """
        Get the appointments starting on a local calendar day.

        Raises:
            BookingStoreError: If the request fails or the body is not a list
        """
        url = f"{self.base_url}/rest/v1/{self.table}"
        start, end = self._day_bounds_utc(day, timezone)

        params = [
            ("select", self.SELECT),
            ("start_time", f"gte.{start.isoformat()}"),
            ("start_time", f"lt.{end.isoformat()}"),
            ("order", "start_time.asc"),
        ]

        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise BookingStoreError(f"Failed to fetch appointments from backend: {exc}") from exc
        except ValueError as exc:
            raise BookingStoreError(f"Backend returned invalid JSON: {exc}") from exc

        return self._parse_rows(data, day, timezone)

    def _parse_rows(self, data: Any, day: date, timezone: str) -> List[AppointmentRecord]:
        if not isinstance(data, list):
            raise BookingStoreError("Backend response must be a list of appointment rows")

        records: List[AppointmentRecord] = []
        for row in data:
            if not isinstance(row, dict):
                logger.warning("Skipping non-object appointment row: %r", row)
                continue
            record = parse_appointment_row(row, timezone)
            if record is not None and record.start.date() == day:
                records.append(record)

        logger.debug("Fetched %d appointment(s) for %s", len(records), day)
        return records
