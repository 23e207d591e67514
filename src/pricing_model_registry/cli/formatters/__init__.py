"""CLI formatters package."""

from .json import (
    format_data_paths_json,
    format_env_vars_json,
    format_json,
    format_models_list_json,
    to_serializable,
)
from .table import (
    create_console,
    format_breakdown_table,
    format_data_paths_table,
    format_env_vars_table,
    format_mapping_table,
    format_model_detail_table,
    format_models_table,
    format_usage_events_table,
)

__all__ = [
    "format_json",
    "format_models_list_json",
    "format_data_paths_json",
    "format_env_vars_json",
    "to_serializable",
    "create_console",
    "format_models_table",
    "format_model_detail_table",
    "format_breakdown_table",
    "format_data_paths_table",
    "format_env_vars_table",
    "format_mapping_table",
    "format_usage_events_table",
]
