"""Core registry functionality for managing pricing models.

This module provides the PricingRegistry class, which loads the catalog of
pricing models once, validates every model, and exposes them read-only.

Typical usage:

    from pricing_model_registry import PricingRegistry, RegistryConfig

    registry = PricingRegistry()  # resolves the catalog path
    # or, for a custom catalog
    registry = PricingRegistry(RegistryConfig(catalog_path="plans.yaml"))

    breakdown = registry.calculate("hybrid", 6000)

The registry is plain data once built. Construct it at startup and pass it
to whatever needs it; there is no module-level instance.
"""

from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .config_paths import resolve_catalog_path
from .config_result import ConfigResult
from .engine import CostBreakdown, calculate
from .errors import InvalidConfigFormatError, InvalidPricingModelError, ModelNotFoundError
from .logging import LogEvent, log_debug, log_error, log_info
from .pricing import PricingModel, PricingModelKind, build_model
from .schema_version import SchemaVersionValidator


class RegistryConfig:
    """Configuration for the pricing registry."""

    def __init__(self, catalog_path: Optional[str] = None):
        """Initialize registry configuration.

        Args:
            catalog_path: Custom path to the catalog YAML file. If None, the
                          path is resolved from PMR_CATALOG_PATH, the user
                          config directory, then the bundled catalog.
        """
        if catalog_path:
            self.catalog_path = catalog_path
            self.catalog_source = "Explicit path"
        else:
            self.catalog_path, self.catalog_source = resolve_catalog_path()


class PricingRegistry:
    """Registry of validated, immutable pricing models."""

    def __init__(self, config: Optional[RegistryConfig] = None):
        """Load and validate the pricing catalog.

        Args:
            config: Configuration for this registry instance. If None, default
                   configuration is used.

        Raises:
            ConfigFileNotFoundError: If the catalog file does not exist
            InvalidConfigFormatError: If the catalog cannot be parsed or has an
                unsupported schema version
            InvalidPricingModelError: If any model in the catalog is invalid
        """
        self.config = config or RegistryConfig()
        self.schema_version: Optional[str] = None
        self.loaded_at = datetime.now()
        self._models: Mapping[PricingModelKind, PricingModel] = MappingProxyType({})
        self._load_models()

    @property
    def catalog_path(self) -> str:
        """Path of the catalog this registry was built from."""
        return self.config.catalog_path

    def _load_config(self) -> ConfigResult:
        """Read and parse the catalog file.

        Returns:
            ConfigResult: Result of the configuration loading operation
        """
        path = self.config.catalog_path
        try:
            content = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            error_msg = f"Pricing catalog not found: {path}"
            log_error(LogEvent.PRICING_REGISTRY, error_msg, path=path)
            return ConfigResult(success=False, error=error_msg, exception=e, path=path, missing=True)
        except OSError as e:
            error_msg = f"Error reading pricing catalog: {e}"
            log_error(LogEvent.PRICING_REGISTRY, error_msg, path=path)
            return ConfigResult(success=False, error=error_msg, exception=e, path=path)

        if not content.strip():
            error_msg = "Pricing catalog file is empty"
            log_error(LogEvent.PRICING_REGISTRY, error_msg, path=path)
            return ConfigResult(success=False, error=error_msg, path=path)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            error_msg = f"YAML parsing error in pricing catalog: {e}"
            log_error(LogEvent.PRICING_REGISTRY, error_msg, path=path)
            return ConfigResult(success=False, error=error_msg, exception=e, path=path)

        if not isinstance(data, dict):
            error_msg = f"Invalid catalog format: expected dictionary, got {type(data).__name__}"
            log_error(LogEvent.PRICING_REGISTRY, error_msg, path=path)
            return ConfigResult(success=False, error=error_msg, path=path)

        return ConfigResult(success=True, data=data, path=path)

    def _load_models(self) -> None:
        """Build every model in the catalog, failing on the first invalid one."""
        data = self._load_config().unwrap()
        path = self.config.catalog_path

        try:
            schema_version = SchemaVersionValidator.get_schema_version(data)
        except ValueError as e:
            raise InvalidConfigFormatError(str(e), path=path) from e

        if not SchemaVersionValidator.is_compatible_schema(schema_version):
            supported = ", ".join(SchemaVersionValidator.SUPPORTED_SCHEMA_VERSIONS)
            raise InvalidConfigFormatError(
                f"Unsupported catalog schema version {schema_version} (supported: {supported})",
                path=path,
            )
        if not SchemaVersionValidator.validate_schema_structure(data, schema_version):
            raise InvalidConfigFormatError(
                "Catalog must contain a 'models' mapping",
                path=path,
            )

        log_info(
            LogEvent.PRICING_REGISTRY,
            "Loading pricing catalog",
            path=path,
            source=self.config.catalog_source,
            version=schema_version,
        )

        models: Dict[PricingModelKind, PricingModel] = {}
        for model_id, model_config in data["models"].items():
            try:
                model = build_model(str(model_id), model_config)
            except InvalidPricingModelError as e:
                log_error(
                    LogEvent.PRICING_MODEL,
                    "Invalid pricing model in catalog",
                    model=model_id,
                    error=e.message,
                    path=path,
                )
                raise
            if model.id in models:
                raise InvalidConfigFormatError(
                    f"Pricing model '{model.id.value}' is defined more than once",
                    path=path,
                )
            models[model.id] = model
            log_debug(
                LogEvent.PRICING_MODEL,
                "Loaded pricing model",
                model=model.id.value,
                tiers=len(model.tiers),
                base_price=str(model.base_price),
            )

        self.schema_version = schema_version
        self._models = MappingProxyType(models)
        log_info(LogEvent.PRICING_REGISTRY, "Pricing catalog loaded", models=len(models))

    @property
    def models(self) -> Mapping[PricingModelKind, PricingModel]:
        """Get a read-only view of registered models."""
        return self._models

    def list_models(self) -> List[str]:
        """Return the ids of all registered models in catalog order."""
        return [kind.value for kind in self._models]

    def get_model(self, model_id: Union[str, PricingModelKind]) -> PricingModel:
        """Get a pricing model by id.

        Args:
            model_id: Catalog id such as "tiered", or a PricingModelKind

        Returns:
            The registered PricingModel

        Raises:
            ModelNotFoundError: If the model is not in the catalog
        """
        try:
            kind = PricingModelKind.parse(model_id)
        except ValueError:
            kind = None

        if kind is None or kind not in self._models:
            available = self.list_models()
            raise ModelNotFoundError(
                f"Pricing model '{getattr(model_id, 'value', model_id)}' not found. "
                f"Available models: {', '.join(sorted(available))}",
                model_id=str(getattr(model_id, "value", model_id)),
                available_models=available,
            )
        return self._models[kind]

    def calculate(self, model_id: Union[str, PricingModelKind], quantity: int) -> CostBreakdown:
        """Look up a model and calculate the cost of a usage quantity.

        Raises:
            ModelNotFoundError: If the model is not in the catalog
            InvalidInputError: If quantity is negative or not an integer
            UnallocatableUsageError: If the model's tiers cannot hold the quantity
        """
        return calculate(self.get_model(model_id), quantity)

    def dump_effective(self) -> Dict[str, Any]:
        """Return the loaded catalog as plain data.

        Returns:
            Dictionary with the models and load metadata
        """
        return {
            "version": self.schema_version,
            "models": {kind.value: model.to_dict() for kind, model in self._models.items()},
            "metadata": {
                "catalog_path": self.catalog_path,
                "catalog_source": self.config.catalog_source,
                "loaded_at": self.loaded_at.isoformat(),
                "model_count": len(self._models),
            },
        }


__all__ = ["PricingRegistry", "RegistryConfig"]
