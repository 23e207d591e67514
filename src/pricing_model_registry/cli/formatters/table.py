"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...engine import CostBreakdown
from ...pricing import PricingModel, round_money


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    return Console(file=output, no_color=no_color)


def _format_money(value: Any, currency: str = "USD") -> str:
    if value is None:
        return "N/A"
    if currency == "USD":
        return f"${value}"
    return f"{value} {currency}"


def _format_bound(value: Optional[int]) -> str:
    return "∞" if value is None else f"{value:,}"


def format_models_table(models: List[PricingModel], console: Optional[Console] = None) -> None:
    """Format pricing models as a Rich table.

    Args:
        models: Models to list
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Pricing Models", show_header=True, header_style="bold magenta")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Base\nPrice", justify="right", no_wrap=True)
    table.add_column("Tiers", justify="right")
    table.add_column("Covers", justify="right", no_wrap=True)
    table.add_column("Description", style="dim")

    for model in models:
        table.add_row(
            model.id.value,
            model.name,
            _format_money(model.base_price, model.currency),
            str(len(model.tiers)),
            _format_bound(model.covered_quantity),
            model.description or "",
        )

    console.print(table)


def format_model_detail_table(model: PricingModel, console: Optional[Console] = None) -> None:
    """Print a model's summary followed by its tier schedule."""
    if console is None:
        console = create_console()

    console.print(f"[bold]Model:[/bold] {model.id.value}")
    console.print(f"[bold]Name:[/bold] {model.name}")
    if model.description:
        console.print(f"[bold]Description:[/bold] {model.description}")
    console.print(f"[bold]Base Price:[/bold] {_format_money(model.base_price, model.currency)}")
    console.print()

    table = Table(title="Tiers", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("From", justify="right")
    table.add_column("To", justify="right")
    table.add_column("Unit\nPrice", justify="right", no_wrap=True)
    table.add_column("Flat\nFee", justify="right", no_wrap=True)

    for tier in model.tiers:
        table.add_row(
            str(tier.id),
            tier.name,
            f"{tier.start_quantity:,}",
            _format_bound(tier.end_quantity),
            _format_money(tier.price_per_unit, model.currency),
            _format_money(tier.flat_fee, model.currency),
        )

    console.print(table)


def format_breakdown_table(breakdown: CostBreakdown, console: Optional[Console] = None) -> None:
    """Format a cost breakdown as a Rich table with a total row."""
    if console is None:
        console = create_console()

    currency = breakdown.currency
    table = Table(
        title=f"Cost of {breakdown.quantity:,} units on '{breakdown.model_id.value}'",
        show_header=True,
        header_style="bold magenta",
        show_footer=True,
    )
    table.add_column("Tier", style="cyan", footer="Total")
    table.add_column("Units", justify="right", footer=f"{breakdown.quantity:,}")
    table.add_column("Unit\nPrice", justify="right")
    table.add_column("Flat\nFee", justify="right")
    table.add_column(
        "Cost",
        justify="right",
        footer=Text(_format_money(round_money(breakdown.total_cost), currency), style="bold green"),
    )

    table.add_row("Base fee", "", "", "", _format_money(round_money(breakdown.base_fee), currency), style="dim")
    for charge in breakdown.charges:
        table.add_row(
            charge.tier_name,
            f"{charge.units_allocated:,}",
            _format_money(charge.unit_price, currency),
            _format_money(round_money(charge.flat_fee), currency) if charge.flat_fee else "",
            _format_money(round_money(charge.tier_cost), currency),
        )

    console.print(table)


def format_data_paths_table(paths: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Format data paths as a Rich table.

    Args:
        paths: Path information
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Data Source Paths", show_header=True, header_style="bold magenta")

    table.add_column("File", style="cyan")
    table.add_column("Source", style="yellow")
    table.add_column("Path", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Modified", style="dim")

    for name, info in paths.items():
        exists = info.get("exists", False)
        table.add_row(
            name,
            info.get("source", "Unknown"),
            info.get("path", "N/A"),
            Text("✓" if exists else "✗", style="green" if exists else "red"),
            info.get("last_modified") or "N/A",
        )

    console.print(table)


def format_env_vars_table(env_vars: Dict[str, Optional[str]], console: Optional[Console] = None) -> None:
    """Format environment variables as a Rich table.

    Args:
        env_vars: Environment variables
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="PMR Environment Variables", show_header=True, header_style="bold magenta")

    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    table.add_column("Status", justify="center")

    for var_name, value in sorted(env_vars.items()):
        if value is not None:
            table.add_row(var_name, value, Text("Set", style="green"))
        else:
            table.add_row(var_name, Text("Not set", style="dim"), Text("Unset", style="dim"))

    console.print(table)


def format_mapping_table(title: str, data: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Print a flat key/value table, used for usage statistics."""
    if console is None:
        console = create_console()

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in sorted(data.items()):
        table.add_row(str(key), "N/A" if value is None else str(value))

    console.print(table)


def format_usage_events_table(events: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """Format usage events returned by the usage service."""
    if console is None:
        console = create_console()

    table = Table(title="Usage Events", show_header=True, header_style="bold magenta")
    table.add_column("Event ID", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Quantity", justify="right")
    table.add_column("Timestamp", style="dim")

    for event in events:
        table.add_row(
            str(event.get("event_id") or event.get("eventId") or event.get("id") or "N/A"),
            str(event.get("event_type") or event.get("eventType") or "N/A"),
            str(event.get("quantity", "N/A")),
            str(event.get("timestamp", "N/A")),
        )

    console.print(table)
