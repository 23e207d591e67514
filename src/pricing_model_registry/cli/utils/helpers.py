"""Helper functions for CLI operations."""

import os
import sys
from typing import Any, Dict, List, Optional

import click

from ...config_paths import ENV_CATALOG_PATH, ENV_USAGE_API_KEY, ENV_USAGE_API_URL
from ...errors import (
    ConfigurationError,
    InvalidInputError,
    InvalidPricingModelError,
    ModelNotFoundError,
    NetworkError,
    UnallocatableUsageError,
)
from ...recorder import UsageEventRecorder
from ...registry import PricingRegistry, RegistryConfig


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    MODEL_NOT_FOUND = 3
    DATA_SOURCE_ERROR = 4
    UNALLOCATABLE_USAGE = 5
    USAGE_SERVICE_ERROR = 6


# Environment variables reported by `pmr data env`
PMR_ENV_VARS: List[str] = [
    ENV_CATALOG_PATH,
    ENV_USAGE_API_KEY,
    ENV_USAGE_API_URL,
]


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def exit_code_for(error: Exception) -> int:
    """Map a library error to the CLI exit code that reports it."""
    if isinstance(error, (InvalidInputError, click.BadParameter)):
        return ExitCode.INVALID_USAGE
    if isinstance(error, ModelNotFoundError):
        return ExitCode.MODEL_NOT_FOUND
    if isinstance(error, UnallocatableUsageError):
        return ExitCode.UNALLOCATABLE_USAGE
    if isinstance(error, NetworkError):
        return ExitCode.USAGE_SERVICE_ERROR
    if isinstance(error, (ConfigurationError, InvalidPricingModelError)):
        return ExitCode.DATA_SOURCE_ERROR
    return ExitCode.GENERIC_ERROR


def get_registry(ctx: click.Context) -> PricingRegistry:
    """Return the registry for this invocation, loading the catalog on first use.

    Args:
        ctx: Click context whose obj carries the global options

    Returns:
        The PricingRegistry built from --catalog or the resolved catalog path
    """
    obj = ctx.ensure_object(dict)
    registry = obj.get("registry")
    if registry is None:
        registry = PricingRegistry(RegistryConfig(catalog_path=obj.get("catalog")))
        obj["registry"] = registry
    return registry


def get_recorder(ctx: click.Context) -> UsageEventRecorder:
    """Return the usage recorder for this invocation, configured from the environment."""
    obj = ctx.ensure_object(dict)
    recorder = obj.get("recorder")
    if recorder is None:
        recorder = UsageEventRecorder.from_env()
        obj["recorder"] = recorder
        ctx.call_on_close(recorder.close)
    return recorder


def get_pmr_env_vars() -> Dict[str, Optional[str]]:
    """Get all PMR_* environment variables.

    The API key value is masked.

    Returns:
        Dictionary of PMR environment variables and their values
    """
    pmr_vars: Dict[str, Optional[str]] = {}
    for key, value in os.environ.items():
        if key.startswith("PMR_"):
            pmr_vars[key] = value

    for var in PMR_ENV_VARS:
        if var not in pmr_vars:
            pmr_vars[var] = None

    key_value = pmr_vars.get(ENV_USAGE_API_KEY)
    if key_value:
        pmr_vars[ENV_USAGE_API_KEY] = mask_secret(key_value)

    return pmr_vars


def mask_secret(value: str) -> str:
    """Keep the last four characters of a secret and hide the rest."""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def validate_format_support(
    format_type: str,
    supported_formats: List[str],
    command_name: str,
    ctx_obj: Dict[str, Any],
) -> str:
    """Validate format support for a command with consistent fallback behavior.

    Args:
        format_type: The requested format
        supported_formats: List of supported formats for this command
        command_name: Name of the command for error messages
        ctx_obj: Click context object containing verbosity settings

    Returns:
        The validated format (may be changed from input for fallback)

    Raises:
        click.BadParameter: For unsupported formats that can't fall back
    """
    if format_type in supported_formats:
        return format_type

    if format_type == "table":
        fallback_format = "json" if "json" in supported_formats else supported_formats[0]
        if ctx_obj.get("verbose", 0) > 0:
            click.echo(
                f"Note: {command_name} doesn't support '{format_type}' format, using {fallback_format} instead.",
                err=True,
            )
        return fallback_format
    else:
        supported_list = "', '".join(supported_formats)
        raise click.BadParameter(f"Format '{format_type}' is not supported for {command_name}. Use '{supported_list}'.")
