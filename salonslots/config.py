"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, time
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import InvalidArgument
from .domain.models import DEFAULT_TIMEZONE, BusinessHours, Service, get_zone
from .domain.slot_calculator import DEFAULT_GRANULARITY_MINUTES


def _parse_hhmm(value: str) -> time:
    try:
        hours, minutes = value.split(":")
        return time(hour=int(hours), minute=int(minutes))
    except ValueError as exc:
        raise ValueError(f"Expected a HH:MM time, got {value!r}") from exc


class BusinessHoursConfig(BaseModel):
    """Opening hours and slot settings."""
    open: str = "09:00"
    close: str = "20:00"
    granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES
    closed_weekdays: List[int] = Field(default_factory=list)  # 0=Monday, 6=Sunday
    holidays: List[date] = Field(default_factory=list)
    non_blocking_statuses: List[str] = Field(default_factory=list)

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Ensure times use the HH:MM format."""
        _parse_hhmm(value)
        return value

    @field_validator("granularity_minutes")
    @classmethod
    def validate_granularity(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("granularity_minutes must be greater than zero")
        return value

    @field_validator("closed_weekdays")
    @classmethod
    def validate_closed_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"closed_weekdays must be between 0 and 6, got {invalid_days}")
        return sorted(set(value))

    @field_validator("non_blocking_statuses")
    @classmethod
    def normalize_statuses(cls, value: List[str]) -> List[str]:
        return [status.strip().lower() for status in value]

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the salon opens before it closes."""
        if self.get_close_time() <= self.get_open_time():
            raise ValueError("close must be later than open")
        return self

    def get_open_time(self) -> time:
        return _parse_hhmm(self.open)

    def get_close_time(self) -> time:
        return _parse_hhmm(self.close)


class ServiceConfig(BaseModel):
    """Service catalog entry."""
    id: str = ""
    name: str
    total_duration: int
    active_duration: Optional[int] = None  # Defaults to total_duration
    default_price: float = 0.0

    def to_service(self) -> Service:
        """Build the domain service, rejecting inconsistent durations."""
        active = self.active_duration if self.active_duration is not None else self.total_duration
        return Service(
            id=self.id or self.name.lower(),
            name=self.name,
            total_duration=self.total_duration,
            active_duration=active,
            default_price=self.default_price,
        )


class BackendConfig(BaseModel):
    """Hosted backend holding the appointments table."""
    url: str
    api_key: str
    table: str = "appointments"

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    services: List[ServiceConfig] = Field(default_factory=list)
    backend: Optional[BackendConfig] = None
    bookings_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            get_zone(value)
        except InvalidArgument as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service names are unique and durations consistent."""
        seen_names: set[str] = set()
        for entry in value:
            name_key = entry.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate service name detected: {entry.name}")
            seen_names.add(name_key)
            try:
                entry.to_service()
            except InvalidArgument as exc:
                raise ValueError(str(exc)) from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def get_business_hours(self) -> BusinessHours:
        hours = self.business_hours
        return BusinessHours(
            open_time=hours.get_open_time(),
            close_time=hours.get_close_time(),
            timezone=self.timezone,
            closed_weekdays=list(hours.closed_weekdays),
            holidays=list(hours.holidays),
        )

    def get_services(self) -> List[Service]:
        return [entry.to_service() for entry in self.services]

    def find_service_by_name(self, name: str) -> Service | None:
        """Find a service by its name (case-insensitive) or id."""
        for entry in self.services:
            service = entry.to_service()
            if service.name.lower() == name.lower() or service.id == name:
                return service
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
