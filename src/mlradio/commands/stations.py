"""
Station catalog command handlers for mlradio.

Handles: list
"""

from typing import Iterable, List, Optional

from rich.table import Table

from mlradio.context import AppContext
from mlradio.core.console import get_console
from mlradio.core.output import log
from mlradio.domain.radio import Station, StationCategory, filter_by_category


def parse_category(value: Optional[str]) -> Optional[StationCategory]:
    """Map a user-supplied category name to StationCategory (None = all)."""
    if not value:
        return None
    try:
        return StationCategory(value.lower())
    except ValueError:
        return None


def render_station_table(stations: Iterable[Station], current: Optional[Station] = None) -> Table:
    """Build a Rich table of stations, marking the current one."""
    table = Table(title="Stations")
    table.add_column("", width=2)
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("URL", style="dim")
    table.add_column("ID", style="dim")

    for station in stations:
        marker = "▶" if current is not None and station == current else ""
        table.add_row(
            marker, station.name, station.category.value, station.url, station.id[:8]
        )

    return table


def handle_list_command(ctx: AppContext, args: List[str]) -> bool:
    """List catalog stations, optionally filtered by category."""
    category = parse_category(args[0]) if args else None
    if args and category is None:
        valid = ", ".join(c.value for c in StationCategory)
        log(f"Unknown category '{args[0]}' (valid: {valid})", level="warning")
        return True

    stations = filter_by_category(ctx.stations, category)
    get_console().print(
        render_station_table(stations, ctx.session.state.current_station)
    )
    return True
