"""Data inspection commands for the PMR CLI."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import click
import yaml

from ...config_paths import CATALOG_FILENAME, copy_default_to_user_config, get_user_config_dir
from ..formatters import (
    create_console,
    format_data_paths_json,
    format_data_paths_table,
    format_env_vars_json,
    format_env_vars_table,
    format_json,
    to_serializable,
)
from ..utils import (
    ExitCode,
    exit_code_for,
    get_pmr_env_vars,
    get_registry,
    handle_error,
    output_option,
    validate_format_support,
)


def _describe_file(path: Path, source: str) -> Dict[str, Any]:
    info: Dict[str, Any] = {
        "path": str(path),
        "source": source,
        "exists": path.exists(),
        "last_modified": None,
        "file_size": None,
    }
    if path.is_file():
        stat = path.stat()
        info["file_size"] = stat.st_size
        info["last_modified"] = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
    return info


@click.group()
def data() -> None:
    """Inspect data sources and configuration."""
    pass


@data.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show the resolved catalog path and where it came from."""
    try:
        registry = get_registry(ctx)
        user_dir = get_user_config_dir()

        path_info = {
            CATALOG_FILENAME: _describe_file(Path(registry.catalog_path), registry.config.catalog_source),
            "user_config_dir": {
                "path": str(user_dir),
                "source": "System",
                "exists": user_dir.is_dir(),
            },
        }

        if ctx.obj["format"] == "json":
            format_json(format_data_paths_json(path_info))
        else:
            format_data_paths_table(path_info, create_console(no_color=ctx.obj["no_color"]))

    except Exception as e:
        handle_error(e, ExitCode.DATA_SOURCE_ERROR)


@data.command()
@click.pass_context
def env(ctx: click.Context) -> None:
    """Show effective PMR environment variables."""
    try:
        env_vars = get_pmr_env_vars()

        if ctx.obj["format"] == "json":
            format_json(format_env_vars_json(env_vars))
        else:
            format_env_vars_table(env_vars, create_console(no_color=ctx.obj["no_color"]))

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@data.command()
@output_option
@click.pass_context
def dump(ctx: click.Context, output: Optional[str] = None) -> None:
    """Dump the validated catalog as JSON or YAML."""
    try:
        format_type = validate_format_support(ctx.obj["format"], ["json", "yaml"], "data dump", ctx.obj)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        return

    try:
        data_to_output = get_registry(ctx).dump_effective()
    except Exception as e:
        handle_error(e, exit_code_for(e))
        return

    output_file: Optional[TextIO] = None
    try:
        if output:
            output_file = open(output, "w")

        if format_type == "yaml":
            yaml_output = yaml.safe_dump(to_serializable(data_to_output), default_flow_style=False, sort_keys=True)
            (output_file or sys.stdout).write(yaml_output)
        else:
            format_json(data_to_output, output_file or sys.stdout)
    except OSError as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
    finally:
        if output_file:
            output_file.close()


@data.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Copy the bundled catalog into the user config directory for editing.

    An existing user catalog is left untouched. Once present, it is used
    whenever neither --catalog nor PMR_CATALOG_PATH is given.
    """
    user_file = get_user_config_dir() / CATALOG_FILENAME
    try:
        created = copy_default_to_user_config()
    except OSError as e:
        handle_error(e, ExitCode.DATA_SOURCE_ERROR)
        return

    if ctx.obj["format"] == "json":
        format_json({"path": str(user_file), "created": created})
    elif created:
        click.echo(f"Created editable catalog at {user_file}")
    else:
        click.echo(f"User catalog already exists at {user_file}")
