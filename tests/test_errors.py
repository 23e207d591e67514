"""Tests for error classes."""

from pricing_model_registry.errors import (
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


class TestErrorClasses:
    """Tests for all error classes."""

    def test_pricing_registry_error(self) -> None:
        """Test PricingRegistryError base class."""
        error = PricingRegistryError("Base error message")
        assert str(error) == "Base error message"

    def test_configuration_errors(self) -> None:
        """Test the configuration error family."""
        missing = ConfigFileNotFoundError("not found", path="/tmp/catalog.yaml")
        assert missing.path == "/tmp/catalog.yaml"
        assert isinstance(missing, ConfigurationError)
        assert isinstance(missing, PricingRegistryError)

        invalid = InvalidConfigFormatError("bad format", path="/tmp/catalog.yaml")
        assert invalid.message == "bad format"
        assert invalid.expected_type == "dict"
        assert isinstance(invalid, ConfigurationError)

    def test_invalid_pricing_model_error(self) -> None:
        """Test InvalidPricingModelError."""
        error = InvalidPricingModelError("tiers overlap", model_id="tiered")
        assert error.model_id == "tiered"
        assert str(error) == "tiers overlap"
        assert isinstance(error, PricingRegistryError)

    def test_model_not_found_error(self) -> None:
        """Test ModelNotFoundError normalises available models."""
        error = ModelNotFoundError("missing", model_id="flat", available_models={"tiered", "hybrid"})
        assert error.available_models == ["hybrid", "tiered"]
        assert str(error) == "missing"

        from_dict = ModelNotFoundError("missing", available_models={"per-unit": object()})
        assert from_dict.available_models == ["per-unit"]

        assert ModelNotFoundError("missing").available_models is None

    def test_invalid_input_error(self) -> None:
        """Test InvalidInputError."""
        error = InvalidInputError("negative", param_name="quantity", value=-5)
        assert error.param_name == "quantity"
        assert error.value == -5
        assert isinstance(error, PricingRegistryError)

    def test_unallocatable_usage_error(self) -> None:
        """Test UnallocatableUsageError."""
        error = UnallocatableUsageError("too much", model_id="tiered", quantity=1500, covered_quantity=1000)
        assert error.excess_quantity == 500
        assert error.model_id == "tiered"

    def test_network_error(self) -> None:
        """Test NetworkError."""
        error = NetworkError("boom", url="https://api.usagey.com/v1/usage/track", status_code=503)
        assert error.status_code == 503
        assert error.url.endswith("/track")
        assert isinstance(error, PricingRegistryError)
