"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from decimal import Decimal
from enum import Enum as _Enum
from typing import Any, Dict, Optional, TextIO


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - Decimal -> string, so money keeps its exact digits
    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def to_serializable(data: Any) -> Any:
    """Convert data to plain JSON types, e.g. before handing it to yaml.safe_dump."""
    return json.loads(json.dumps(data, default=_default_serializer))


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_models_list_json(models: Dict[str, Any]) -> Dict[str, Any]:
    """Format models list for JSON output.

    Args:
        models: Mapping of model id to serialized model

    Returns:
        Formatted data structure
    """
    sorted_models = [model_data for _, model_data in sorted(models.items())]
    return {"models": sorted_models, "count": len(models)}


def format_data_paths_json(paths: Dict[str, Any]) -> Dict[str, Any]:
    """Format data paths for JSON output."""
    return {"data_paths": paths}


def format_env_vars_json(env_vars: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Format environment variables for JSON output."""
    return {"environment_variables": dict(sorted(env_vars.items()))}
