"""CLI commands package."""

from . import calculate, data, models, usage

__all__ = ["calculate", "data", "models", "usage"]
