"""Registry of usage-based pricing models and cost calculation.

This package loads a catalog of pricing models (per-unit, tiered, hybrid),
validates each model once, and calculates the cost of a usage quantity as a
per-tier breakdown plus the model's base fee. A small client for an external
usage-tracking service is included for callers that report what they bill.
"""

try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _version

    __version__ = _version("pricing-model-registry")
except PackageNotFoundError:
    raise ImportError(
        "Failed to determine package version. pricing-model-registry must be installed as a package "
        "(for development: pip install -e .)."
    )

from .engine import CostBreakdown, TierCharge, calculate
from .errors import (
    ConfigFileNotFoundError,
    ConfigurationError,
    InvalidConfigFormatError,
    InvalidInputError,
    InvalidPricingModelError,
    ModelNotFoundError,
    NetworkError,
    PricingRegistryError,
    UnallocatableUsageError,
)
from .pricing import PricingModel, PricingModelKind, Tier
from .recorder import RecordedEvent, UsageEventRecorder
from .registry import PricingRegistry, RegistryConfig

# Define public API
__all__ = [
    # Engine
    "calculate",
    "CostBreakdown",
    "TierCharge",
    # Models
    "PricingModel",
    "PricingModelKind",
    "Tier",
    # Catalog
    "PricingRegistry",
    "RegistryConfig",
    # Usage service
    "UsageEventRecorder",
    "RecordedEvent",
    # Errors
    "PricingRegistryError",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "InvalidConfigFormatError",
    "InvalidPricingModelError",
    "ModelNotFoundError",
    "InvalidInputError",
    "UnallocatableUsageError",
    "NetworkError",
]
