"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.booking_store import JsonBookingStore
from ..adapters.rest_client import RestBookingStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SalonSlotsError
from ..domain.slot_calculator import SlotAvailabilityCalculator
from ..services.availability import AvailabilityService, BookingStoreProtocol

DEFAULT_DURATION_MINUTES = 30

app = typer.Typer(
    name="salonslots",
    help="Find free appointment times in the salon agenda",
    add_completion=False
)

console = Console()


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_day(value: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError:
        console.print(
            f"[bold red]Error:[/bold red] invalid date '{escape(value)}', expected YYYY-MM-DD"
        )
        raise typer.Exit(1)


def _build_store(config: AppConfig, bookings_file: Optional[Path]) -> BookingStoreProtocol:
    """Pick the booking store: explicit file, hosted backend, then configured file."""
    if bookings_file is not None:
        return JsonBookingStore(bookings_file)
    if config.backend is not None:
        return RestBookingStore(
            base_url=config.backend.url,
            api_key=config.backend.api_key,
            table=config.backend.table,
        )
    if config.bookings_file is not None:
        return JsonBookingStore(config.bookings_file)
    raise SalonSlotsError(
        "No booking store configured. Set 'backend' or 'bookings_file' in the config "
        "or pass --bookings."
    )


def _build_service(config: AppConfig, bookings_file: Optional[Path]) -> AvailabilityService:
    return AvailabilityService(
        booking_store=_build_store(config, bookings_file),
        slot_calculator=SlotAvailabilityCalculator(
            granularity_minutes=config.business_hours.granularity_minutes
        ),
        business_hours=config.get_business_hours(),
        non_blocking_statuses=config.business_hours.non_blocking_statuses,
    )


@app.command()
def slots(
    day: Annotated[str, typer.Argument(help="Day to check (YYYY-MM-DD)")],
    service_name: Annotated[Optional[str], typer.Option("--service", "-s", help="Service from the catalog")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Total duration in minutes")] = None,
    active: Annotated[Optional[int], typer.Option("--active", "-a", help="Active duration in minutes (defaults to total)")] = None,
    bookings_file: Annotated[Optional[Path], typer.Option("--bookings", "-b", help="JSON export of the appointments table")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    List the free start times for a service on one day.

    Examples:

        salonslots slots 2026-10-19 --service "Corte"

        salonslots slots 2026-10-19 --duration 90 --active 30 --bookings citas.json
    """
    _configure_logging(verbose)
    target_day = _parse_day(day)

    try:
        config = _load_config(config_file)

        if service_name:
            service = config.find_service_by_name(service_name)
            if service is None:
                console.print(f"[bold red]Error:[/bold red] Unknown service '{service_name}'")
                raise typer.Exit(1)
            total = duration if duration is not None else service.total_duration
            active_min = active if active is not None else service.active_duration
        else:
            total = duration if duration is not None else DEFAULT_DURATION_MINUTES
            active_min = active if active is not None else total

        availability = _build_service(config, bookings_file)
        free_slots = availability.find_slots(
            day=target_day,
            total_duration=total,
            active_duration=active_min,
        )

    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(
        f"\n[bold cyan]{target_day.format('DD/MM/YYYY')}[/bold cyan] · "
        f"duración {total} min · activo {min(active_min, total)} min\n"
    )

    if not free_slots:
        console.print(
            "[yellow]No hay huecos disponibles para esa duración/activo en este día.[/yellow]"
        )
        return

    console.print(f"[bold green]✓ {len(free_slots)} hueco(s) disponible(s):[/bold green]\n")
    for slot in free_slots:
        console.print(f"  {slot.format_display()}", markup=False)
    console.print()


@app.command()
def services(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List the configured service catalog.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    catalog = config.get_services()
    if not catalog:
        console.print("[yellow]No services defined in the config file.[/yellow]")
        return

    table = Table(
        title="Servicios",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Servicio", style="bold yellow")
    table.add_column("Total (min)", justify="right")
    table.add_column("Activo (min)", justify="right")
    table.add_column("Precio", justify="right", style="dim")

    for service in catalog:
        table.add_row(
            service.name,
            str(service.total_duration),
            str(service.active_duration),
            f"{service.default_price:.2f} €",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def day(
    day_str: Annotated[str, typer.Argument(metavar="DAY", help="Day to list (YYYY-MM-DD)")],
    bookings_file: Annotated[Optional[Path], typer.Option("--bookings", "-b", help="JSON export of the appointments table")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    List the appointments booked on one day.
    """
    target_day = _parse_day(day_str)

    try:
        config = _load_config(config_file)
        availability = _build_service(config, bookings_file)
        appointments = availability.fetch_appointments(day=target_day)
    except (SalonSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not appointments:
        console.print("[yellow]No hay citas en este día.[/yellow]")
        return

    for record in appointments:
        console.print(f"  {record.format_display(config.timezone)}", markup=False)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
