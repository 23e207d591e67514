"""CLI utilities package."""

from .helpers import (
    ExitCode,
    exit_code_for,
    get_pmr_env_vars,
    get_recorder,
    get_registry,
    handle_error,
    mask_secret,
    resolve_format,
    validate_format_support,
)
from .options import event_filter_options, output_option

__all__ = [
    "ExitCode",
    "exit_code_for",
    "resolve_format",
    "handle_error",
    "get_registry",
    "get_recorder",
    "get_pmr_env_vars",
    "mask_secret",
    "validate_format_support",
    "output_option",
    "event_filter_options",
]
