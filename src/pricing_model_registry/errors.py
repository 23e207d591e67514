"""Error types for the pricing model registry.

This module defines the error types raised while loading pricing models,
calculating costs, and talking to the usage-tracking service.
"""

from typing import Any, Dict, List, Optional, Set, Union


class PricingRegistryError(Exception):
    """Base class for all registry-related errors.

    This is the parent class for all registry-specific exceptions.
    """

    pass


class ConfigurationError(PricingRegistryError):
    """Base class for configuration-related errors.

    This is raised for errors related to configuration loading, parsing,
    or validation.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the configuration file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when the pricing catalog file is not found.

    Examples:
        >>> try:
        ...     PricingRegistry(RegistryConfig(catalog_path="missing.yaml"))
        ... except ConfigFileNotFoundError as e:
        ...     print(f"Catalog not found: {e.path}")
    """

    pass


class InvalidConfigFormatError(ConfigurationError):
    """Raised when the pricing catalog has an invalid format.

    Examples:
        >>> try:
        ...     PricingRegistry(RegistryConfig(catalog_path="broken.yaml"))
        ... except InvalidConfigFormatError as e:
        ...     print(f"Invalid catalog format: {e}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the configuration file
            expected_type: Expected type of the configuration
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class InvalidPricingModelError(PricingRegistryError):
    """Raised when a pricing model violates its structural rules.

    Overlapping or non-contiguous tiers, an unbounded tier that is not the
    last one, or negative prices all end up here. The model is unusable.
    """

    def __init__(self, message: str, model_id: Optional[str] = None) -> None:
        """Initialize invalid pricing model error.

        Args:
            message: Error message
            model_id: Identifier of the offending model, if known
        """
        super().__init__(message)
        self.message = message
        self.model_id = model_id


class ModelNotFoundError(PricingRegistryError):
    """Raised when a pricing model is not defined in the catalog.

    Examples:
        >>> try:
        ...     registry.get_model("enterprise")
        ... except ModelNotFoundError as e:
        ...     print(f"Model {e.model_id} is not defined")
    """

    def __init__(
        self,
        message: str,
        model_id: Optional[str] = None,
        available_models: Optional[Union[List[str], Set[str], Dict[str, Any]]] = None,
    ) -> None:
        """Initialize model not found error.

        Args:
            message: Error message
            model_id: The requested model identifier
            available_models: Identifiers that are defined (optional)
        """
        super().__init__(message)
        self.model_id = model_id
        self.message = message
        # Normalise other collection types to a sorted list
        if available_models is not None:
            if isinstance(available_models, dict):
                self.available_models: Optional[List[str]] = sorted(available_models.keys())
            else:
                self.available_models = sorted(available_models)
        else:
            self.available_models = None

    def __str__(self) -> str:
        """Return string representation of the error.

        Returns:
            Error message
        """
        return self.message


class InvalidInputError(PricingRegistryError):
    """Raised when a call argument is malformed.

    A negative or non-integer usage quantity is rejected before any tier
    allocation starts.

    Examples:
        >>> try:
        ...     calculate(model, -5)
        ... except InvalidInputError as e:
        ...     print(f"{e.param_name}={e.value!r} rejected")
    """

    def __init__(self, message: str, param_name: str, value: Any) -> None:
        """Initialize invalid input error.

        Args:
            message: Error message
            param_name: The name of the rejected argument
            value: The rejected value
        """
        super().__init__(message)
        self.message = message
        self.param_name = param_name
        self.value = value


class UnallocatableUsageError(PricingRegistryError):
    """Raised when usage exceeds the range covered by a model's tiers.

    This only happens for models whose last tier is bounded. The usage is
    reported instead of being billed partially.
    """

    def __init__(
        self,
        message: str,
        model_id: str,
        quantity: int,
        covered_quantity: int,
    ) -> None:
        """Initialize unallocatable usage error.

        Args:
            message: Error message
            model_id: Identifier of the model used for the calculation
            quantity: The requested usage quantity
            covered_quantity: Number of units the model's tiers can hold
        """
        super().__init__(message)
        self.message = message
        self.model_id = model_id
        self.quantity = quantity
        self.covered_quantity = covered_quantity

    @property
    def excess_quantity(self) -> int:
        """Units that could not be placed in any tier."""
        return self.quantity - self.covered_quantity


class NetworkError(PricingRegistryError):
    """Raised when a request to the usage-tracking service fails.

    Examples:
        >>> try:
        ...     recorder.record_event("api_call", 1)
        ... except NetworkError as e:
        ...     print(f"Usage service error ({e.status_code}): {e}")
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Initialize network error.

        Args:
            message: Error message
            url: Optional URL that was being accessed
            status_code: HTTP status code, when a response was received
        """
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code
