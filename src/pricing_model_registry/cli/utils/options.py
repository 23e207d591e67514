"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

F = TypeVar("F", bound=Callable[..., Any])


def output_option(func: F) -> F:
    """Add --output option to a command."""

    @click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write output to file instead of stdout.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def event_filter_options(func: F) -> F:
    """Add the usage-event filter options to a command."""

    @click.option("--event-type", type=str, help="Only include events of this type.")
    @click.option("--start-date", type=str, help="Only include events on or after this ISO date.")
    @click.option("--end-date", type=str, help="Only include events on or before this ISO date.")
    @click.option("--limit", type=click.IntRange(min=1), help="Maximum number of events to return.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)
