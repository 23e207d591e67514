"""Main CLI application for the Pricing Model Registry."""

import json
from typing import Optional

import click
import rich_click as rich_click

from ..config_paths import ENV_CATALOG_PATH, ENV_USAGE_API_KEY, ENV_USAGE_API_URL
from ..logging import configure_cli_logging
from .utils import ExitCode, resolve_format

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True

FORMAT_CHOICES = ["table", "json", "yaml"]


def _cli_version() -> str:
    try:
        from .. import __version__

        return __version__
    except ImportError:
        return "unknown"


def _show_version(ctx: click.Context) -> None:
    """Print version information and exit."""
    version = _cli_version()
    click.echo(f"PMR CLI version: {version}")
    click.echo(f"Library version: {version}")
    ctx.exit()


def _show_json_help(ctx: click.Context) -> None:
    """Show comprehensive JSON help and exit."""
    help_data = {
        "command": "pmr",
        "description": "Pricing Model Registry CLI - inspect pricing models and calculate usage costs",
        "usage": "pmr [OPTIONS] COMMAND [ARGS]...",
        "version": _cli_version(),
        "global_options": [
            {"name": "--catalog", "type": "path", "help": "Pricing catalog YAML to load.", "required": False},
            {
                "name": "--format",
                "type": "choice",
                "choices": FORMAT_CHOICES,
                "help": "Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
                "required": False,
            },
            {"name": "--verbose", "short": "-v", "type": "count", "help": "Increase verbosity.", "required": False},
            {"name": "--quiet", "short": "-q", "type": "count", "help": "Decrease verbosity.", "required": False},
            {"name": "--debug", "type": "flag", "help": "Enable debug-level logging.", "required": False},
            {"name": "--no-color", "type": "flag", "help": "Disable color output.", "required": False},
            {"name": "--version", "type": "flag", "help": "Print version information.", "required": False},
            {"name": "--help-json", "type": "flag", "help": "Show help in JSON format.", "required": False},
        ],
        "commands": {
            "models": {
                "description": "Pricing model listing and inspection",
                "subcommands": {
                    "list": {
                        "description": "List all pricing models",
                        "options": [{"name": "--filter", "type": "string", "help": "Match id or name"}],
                    },
                    "get": {
                        "description": "Show a pricing model and its tiers",
                        "arguments": [{"name": "model_id", "type": "string", "required": True}],
                        "options": [
                            {"name": "--output", "short": "-o", "type": "path", "help": "Write output to file"}
                        ],
                    },
                },
            },
            "calculate": {
                "description": "Calculate the cost of a usage quantity",
                "arguments": [
                    {"name": "model_id", "type": "string", "required": True},
                    {"name": "quantity", "type": "integer", "required": True},
                ],
                "options": [
                    {"name": "--record", "type": "flag", "help": "Send the calculation to the usage service"},
                    {"name": "--event-type", "type": "string", "help": "Event type used with --record"},
                ],
            },
            "usage": {
                "description": "Usage-tracking service operations",
                "subcommands": {
                    "track": {
                        "description": "Record one usage event",
                        "arguments": [{"name": "event_type", "type": "string", "required": True}],
                        "options": [
                            {"name": "--quantity", "type": "number", "help": "Units consumed"},
                            {"name": "--metadata", "type": "json", "help": "Event details as a JSON object"},
                        ],
                    },
                    "stats": {"description": "Show aggregate usage statistics", "options": []},
                    "events": {
                        "description": "List recent usage events",
                        "options": [
                            {"name": "--event-type", "type": "string"},
                            {"name": "--start-date", "type": "string"},
                            {"name": "--end-date", "type": "string"},
                            {"name": "--limit", "type": "integer"},
                        ],
                    },
                },
            },
            "data": {
                "description": "Data source inspection and dumping",
                "subcommands": {
                    "paths": {"description": "Show the resolved catalog path and its source", "options": []},
                    "env": {"description": "Show effective PMR environment variables", "options": []},
                    "dump": {
                        "description": "Dump the validated catalog",
                        "options": [
                            {"name": "--output", "short": "-o", "type": "path", "help": "Write output to file"}
                        ],
                    },
                    "init": {"description": "Seed an editable catalog in the user config directory", "options": []},
                },
            },
        },
        "exit_codes": {
            str(ExitCode.SUCCESS): "Success",
            str(ExitCode.GENERIC_ERROR): "Generic error",
            str(ExitCode.INVALID_USAGE): "Invalid usage",
            str(ExitCode.MODEL_NOT_FOUND): "Model not found",
            str(ExitCode.DATA_SOURCE_ERROR): "Catalog missing/corrupt/invalid",
            str(ExitCode.UNALLOCATABLE_USAGE): "Usage exceeds the model's tiers",
            str(ExitCode.USAGE_SERVICE_ERROR): "Usage service error",
        },
        "environment_variables": [ENV_CATALOG_PATH, ENV_USAGE_API_KEY, ENV_USAGE_API_URL],
    }

    click.echo(json.dumps(help_data, indent=2, sort_keys=True))
    ctx.exit()


@click.group()
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False),
    help="Pricing catalog YAML to load. Takes precedence over PMR_CATALOG_PATH.",
)
@click.option(
    "--format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option(
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: _show_version(ctx) if value else None,
    help="Print CLI and library version information.",
)
@click.option(
    "--help-json",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: _show_json_help(ctx) if value else None,
    help="Show help in JSON format for programmatic use.",
)
@click.pass_context
def app(
    ctx: click.Context,
    catalog: Optional[str] = None,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
) -> None:
    """Pricing Model Registry CLI - inspect pricing models and calculate usage costs.

    Examples:
      # List the pricing models in the catalog
      pmr models list

      # Cost of 2500 units on the tiered model
      pmr calculate tiered 2500

      # Same, as JSON, and record it with the usage service
      pmr --format json calculate tiered 2500 --record

      # Show where the catalog was loaded from
      pmr data paths
    """
    ctx.ensure_object(dict)

    # Configure logging level based on verbosity
    log_level = "WARNING"
    if debug:
        log_level = "DEBUG"
    elif verbose > quiet:
        log_level = "DEBUG" if verbose >= 2 else "INFO"
    elif quiet > verbose:
        log_level = "ERROR"
    configure_cli_logging(log_level)

    # The registry itself is built lazily by get_registry() from these options
    ctx.obj.update(
        {
            "catalog": catalog,
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


from .commands import calculate, data, models, usage  # noqa: E402

app.add_command(models.models)
app.add_command(calculate.calculate)
app.add_command(usage.usage)
app.add_command(data.data)


def main() -> None:
    """Entry point for the pmr console script."""
    app(obj={})


if __name__ == "__main__":
    main()
