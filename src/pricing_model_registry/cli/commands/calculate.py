"""Cost calculation command for the PMR CLI."""

import click
import yaml

from ...engine import CostBreakdown
from ...pricing import round_money
from ..formatters import create_console, format_breakdown_table, format_json, to_serializable
from ..utils import exit_code_for, get_recorder, get_registry, handle_error

DEFAULT_EVENT_TYPE = "billing_simulation"


def _record_breakdown(ctx: click.Context, breakdown: CostBreakdown, event_type: str) -> None:
    """Send the calculation to the usage service; failures only warn."""
    try:
        recorder = get_recorder(ctx)
        event = recorder.record_event(
            event_type,
            breakdown.quantity,
            {
                "pricing_model": breakdown.model_id.value,
                "calculated_cost": str(round_money(breakdown.total_cost)),
            },
        )
    except Exception as e:
        click.echo(f"Warning: usage event was not recorded: {e}", err=True)
        return

    if ctx.obj.get("verbose", 0) > 0:
        click.echo(f"Recorded usage event {event.event_id}", err=True)


# Negative quantities reach the engine instead of being parsed as options
@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("model_id")
@click.argument("quantity", type=int)
@click.option("--record", is_flag=True, help="Also send the calculation to the usage service.")
@click.option(
    "--event-type",
    default=DEFAULT_EVENT_TYPE,
    show_default=True,
    help="Event type used with --record.",
)
@click.pass_context
def calculate(ctx: click.Context, model_id: str, quantity: int, record: bool, event_type: str) -> None:
    """Calculate the cost of QUANTITY units on pricing model MODEL_ID.

    Examples:
      pmr calculate tiered 2500

      pmr --format json calculate hybrid 6000 --record
    """
    try:
        breakdown = get_registry(ctx).calculate(model_id, quantity)
    except Exception as e:
        handle_error(e, exit_code_for(e))
        return

    format_type = ctx.obj["format"]
    if format_type == "json":
        format_json(breakdown.to_dict())
    elif format_type == "yaml":
        click.echo(yaml.safe_dump(to_serializable(breakdown.to_dict()), sort_keys=False), nl=False)
    else:
        format_breakdown_table(breakdown, create_console(no_color=ctx.obj["no_color"]))

    if record:
        _record_breakdown(ctx, breakdown, event_type)
