"""Model inspection commands for the PMR CLI."""

from typing import Optional, TextIO

import click
import yaml

from ..formatters import (
    create_console,
    format_json,
    format_model_detail_table,
    format_models_list_json,
    format_models_table,
    to_serializable,
)
from ..utils import ExitCode, exit_code_for, get_registry, handle_error, output_option


@click.group()
def models() -> None:
    """List and inspect pricing models."""
    pass


@models.command("list")
@click.option("--filter", "filter_expr", help="Only show models whose id or name contains this text.")
@click.pass_context
def list_models(ctx: click.Context, filter_expr: Optional[str] = None) -> None:
    """List all pricing models in the catalog."""
    try:
        registry = get_registry(ctx)
        selected = [registry.get_model(model_id) for model_id in registry.list_models()]

        if filter_expr:
            needle = filter_expr.lower()
            selected = [m for m in selected if needle in m.id.value or needle in m.name.lower()]

        format_type = ctx.obj["format"]
        if format_type == "json":
            format_json(format_models_list_json({m.id.value: m.to_dict() for m in selected}))
        elif format_type == "yaml":
            data = to_serializable(format_models_list_json({m.id.value: m.to_dict() for m in selected}))
            click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=True), nl=False)
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_models_table(selected, console)

            if ctx.obj.get("verbose", 0) > 0:
                console.print(f"\n[dim]Showing {len(selected)} models[/dim]")

    except Exception as e:
        handle_error(e, exit_code_for(e))


@models.command()
@click.argument("model_id")
@output_option
@click.pass_context
def get(ctx: click.Context, model_id: str, output: Optional[str] = None) -> None:
    """Show a pricing model and its tier schedule.

    MODEL_ID is one of the catalog ids, e.g. per-unit, tiered or hybrid.
    """
    try:
        model = get_registry(ctx).get_model(model_id)
        format_type = ctx.obj["format"]

        output_file: Optional[TextIO] = None
        if output:
            output_file = open(output, "w")

        try:
            if format_type == "yaml":
                yaml_output = yaml.safe_dump(
                    to_serializable(model.to_dict()), default_flow_style=False, sort_keys=False
                )
                if output_file:
                    output_file.write(yaml_output)
                else:
                    click.echo(yaml_output, nl=False)
            elif format_type == "json" or output_file:
                format_json(model.to_dict(), output_file)
            else:
                format_model_detail_table(model, create_console(no_color=ctx.obj["no_color"]))
        finally:
            if output_file:
                output_file.close()

    except OSError as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
    except Exception as e:
        handle_error(e, exit_code_for(e))
