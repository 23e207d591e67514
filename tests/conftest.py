"""Shared fixtures for the pricing model registry tests."""

import copy
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from pricing_model_registry.pricing import PricingModel, Tier

# Same rates as the bundled catalog, except per-unit has no base price
SAMPLE_CATALOG: Dict[str, Any] = {
    "version": "1.0.0",
    "models": {
        "per-unit": {
            "name": "Per Unit",
            "description": "Fixed price per unit of usage",
            "base_price": 0,
            "tiers": [
                {"id": 1, "name": "All Units", "start_quantity": 0, "end_quantity": None, "price_per_unit": 0.01},
            ],
        },
        "tiered": {
            "name": "Tiered",
            "base_price": 0,
            "tiers": [
                {"id": 1, "start_quantity": 0, "end_quantity": 1000, "price_per_unit": 0.02},
                {"id": 2, "start_quantity": 1001, "end_quantity": 10000, "price_per_unit": 0.01},
                {"id": 3, "start_quantity": 10001, "end_quantity": None, "price_per_unit": 0.005},
            ],
        },
        "hybrid": {
            "name": "Hybrid",
            "base_price": 49.99,
            "tiers": [
                {"id": 1, "name": "Included", "start_quantity": 0, "end_quantity": 5000, "price_per_unit": 0},
                {"id": 2, "name": "Overage", "start_quantity": 5001, "end_quantity": None, "price_per_unit": 0.008},
            ],
        },
    },
}


@pytest.fixture(autouse=True)
def clean_pmr_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PMR_* variables from the developer's shell out of the tests."""
    for name in ("PMR_CATALOG_PATH", "PMR_USAGE_API_KEY", "PMR_USAGE_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[[Any], Path]:
    """Return a helper that writes a catalog document to a temporary YAML file."""

    def _write(content: Any, name: str = "pricing_models.yaml") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content)
        else:
            with open(path, "w") as f:
                yaml.safe_dump(content, f)
        return path

    return _write


@pytest.fixture
def sample_catalog() -> Dict[str, Any]:
    """A fresh copy of the sample catalog document."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture
def catalog_path(write_catalog: Callable[[Any], Path], sample_catalog: Dict[str, Any]) -> Path:
    """Path to a valid catalog with the three sample models."""
    return write_catalog(sample_catalog)


@pytest.fixture
def per_unit_model() -> PricingModel:
    """Per-unit model at 0.01 with no base price."""
    return PricingModel(
        id="per-unit",  # type: ignore[arg-type]
        tiers=(Tier(id=1, start_quantity=0, end_quantity=None, price_per_unit="0.01"),),
    )


@pytest.fixture
def tiered_model() -> PricingModel:
    """Three-tier volume model with no base price."""
    return PricingModel(
        id="tiered",  # type: ignore[arg-type]
        tiers=(
            Tier(id=1, start_quantity=0, end_quantity=1000, price_per_unit="0.02"),
            Tier(id=2, start_quantity=1001, end_quantity=10000, price_per_unit="0.01"),
            Tier(id=3, start_quantity=10001, end_quantity=None, price_per_unit="0.005"),
        ),
    )


@pytest.fixture
def hybrid_model() -> PricingModel:
    """Hybrid model with 5000 included units and a 49.99 base price."""
    return PricingModel(
        id="hybrid",  # type: ignore[arg-type]
        base_price="49.99",
        tiers=(
            Tier(id=1, name="Included", start_quantity=0, end_quantity=5000, price_per_unit=0),
            Tier(id=2, name="Overage", start_quantity=5001, end_quantity=None, price_per_unit="0.008"),
        ),
    )
