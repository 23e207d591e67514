"""Usage service commands for the PMR CLI."""

import json
from typing import Any, Dict, Optional

import click

from ...errors import InvalidInputError
from ..formatters import create_console, format_json, format_mapping_table, format_usage_events_table
from ..utils import ExitCode, event_filter_options, get_recorder, handle_error


def _exit_code(error: Exception) -> int:
    # Missing credentials count as a usage service problem, not a catalog one
    if isinstance(error, InvalidInputError):
        return ExitCode.INVALID_USAGE
    return ExitCode.USAGE_SERVICE_ERROR


def _parse_metadata(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"--metadata is not valid JSON: {e}")
    if not isinstance(metadata, dict):
        raise click.BadParameter("--metadata must be a JSON object")
    return metadata


@click.group()
def usage() -> None:
    """Record and inspect events on the usage-tracking service.

    Requires PMR_USAGE_API_KEY; PMR_USAGE_API_URL overrides the service URL.
    """
    pass


@usage.command()
@click.argument("event_type")
@click.option("--quantity", type=float, default=1, show_default=True, help="Units consumed by the event.")
@click.option("--metadata", help='Event details as a JSON object, e.g. \'{"plan": "pro"}\'.')
@click.pass_context
def track(ctx: click.Context, event_type: str, quantity: float, metadata: Optional[str] = None) -> None:
    """Record one usage event of type EVENT_TYPE."""
    try:
        details = _parse_metadata(metadata)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return

    try:
        event = get_recorder(ctx).record_event(event_type, quantity, details)
    except Exception as e:
        handle_error(e, _exit_code(e))
        return

    if ctx.obj["format"] == "table":
        console = create_console(no_color=ctx.obj["no_color"])
        console.print(f"[green]✓[/green] Recorded event [bold]{event.event_id}[/bold] at {event.timestamp}")
    else:
        format_json({"event_id": event.event_id, "timestamp": event.timestamp, "usage": event.usage})


@usage.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show aggregate usage statistics."""
    try:
        data = get_recorder(ctx).get_usage_stats()
    except Exception as e:
        handle_error(e, _exit_code(e))
        return

    if ctx.obj["format"] == "table":
        format_mapping_table("Usage Statistics", data, create_console(no_color=ctx.obj["no_color"]))
    else:
        format_json(data)


@usage.command()
@event_filter_options
@click.pass_context
def events(
    ctx: click.Context,
    event_type: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    limit: Optional[int] = None,
) -> None:
    """List recent usage events."""
    try:
        data = get_recorder(ctx).get_usage_events(
            event_type=event_type,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )
    except Exception as e:
        handle_error(e, _exit_code(e))
        return

    if ctx.obj["format"] == "table":
        rows = data.get("events", []) if isinstance(data, dict) else data
        format_usage_events_table(list(rows or []), create_console(no_color=ctx.obj["no_color"]))
    else:
        format_json(data)
