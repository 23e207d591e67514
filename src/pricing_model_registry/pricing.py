"""Pricing data structures for the pricing model registry."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from .errors import InvalidPricingModelError

Money = Decimal
MoneyLike = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


class PricingModelKind(str, Enum):
    """Billing schemes known to the registry."""

    PER_UNIT = "per-unit"
    TIERED = "tiered"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: Union[str, "PricingModelKind"]) -> "PricingModelKind":
        """Return the kind for a catalog key such as ``"per-unit"``.

        Raises:
            ValueError: If the value is not a known kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown pricing model '{value}'. Allowed values: {allowed}") from None


def to_money(value: MoneyLike, name: str = "amount") -> Money:
    """Convert a numeric value into a ``Decimal`` amount.

    Floats go through ``str()`` so that ``0.01`` stays exactly one cent.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got bool")
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        raise ValueError(f"{name} must be a finite number, got {value}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"{name} must be a finite number, got {value}")
    return amount


def round_money(amount: Money) -> Money:
    """Round an amount to whole cents for display and serialization."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Tier:
    """A contiguous usage range with its own rate and flat fee.

    Bounds are inclusive on both ends and count units from 1, so a tier from
    1001 to 10000 holds 9000 units. A first tier starting at 0 begins with the
    first unit: 0 to 1000 holds 1000 units. ``end_quantity`` of ``None`` marks
    the unbounded terminal tier.
    """

    id: int
    start_quantity: int
    end_quantity: Optional[int]
    price_per_unit: Money
    flat_fee: Money = Decimal("0")
    name: str = ""

    def __post_init__(self) -> None:  # noqa: D401
        """Normalise money fields and check the tier on its own."""
        object.__setattr__(self, "price_per_unit", to_money(self.price_per_unit, "price_per_unit"))
        object.__setattr__(self, "flat_fee", to_money(self.flat_fee, "flat_fee"))
        if not self.name:
            object.__setattr__(self, "name", f"Tier {self.id}")

        if isinstance(self.start_quantity, bool) or not isinstance(self.start_quantity, int):
            raise ValueError(f"Tier {self.id}: start_quantity must be an integer")
        if self.start_quantity < 0:
            raise ValueError(f"Tier {self.id}: start_quantity must be non-negative")
        if self.end_quantity is not None:
            if isinstance(self.end_quantity, bool) or not isinstance(self.end_quantity, int):
                raise ValueError(f"Tier {self.id}: end_quantity must be an integer or None")
            if self.end_quantity < self.start_quantity:
                raise ValueError(
                    f"Tier {self.id}: end_quantity {self.end_quantity} is below "
                    f"start_quantity {self.start_quantity}"
                )
        if self.price_per_unit < 0:
            raise ValueError(f"Tier {self.id}: price_per_unit must be non-negative")
        if self.flat_fee < 0:
            raise ValueError(f"Tier {self.id}: flat_fee must be non-negative")

    @property
    def is_unbounded(self) -> bool:
        """Whether the tier has no upper limit."""
        return self.end_quantity is None

    @property
    def capacity(self) -> Optional[int]:
        """Number of units the tier holds, or None when unbounded."""
        if self.end_quantity is None:
            return None
        return self.end_quantity - max(self.start_quantity, 1) + 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the tier using the catalog field names."""
        return {
            "id": self.id,
            "name": self.name,
            "start_quantity": self.start_quantity,
            "end_quantity": self.end_quantity,
            "price_per_unit": self.price_per_unit,
            "flat_fee": self.flat_fee,
        }


@dataclass(frozen=True)
class PricingModel:
    """A named billing scheme: a base price plus ordered usage tiers.

    Per-unit models are a single unbounded tier. Hybrid models are tiered
    models whose first tier is free and whose base price covers it. The
    structural rules are checked here, once, so a constructed model is
    always safe to calculate with.
    """

    id: PricingModelKind
    tiers: Tuple[Tier, ...]
    base_price: Money = Decimal("0")
    name: str = ""
    description: str = ""
    currency: str = "USD"

    def __post_init__(self) -> None:  # noqa: D401
        """Normalise fields and validate the tier layout."""
        try:
            kind = PricingModelKind.parse(self.id)
        except ValueError as e:
            raise InvalidPricingModelError(str(e), model_id=str(self.id)) from None
        object.__setattr__(self, "id", kind)
        object.__setattr__(self, "tiers", tuple(self.tiers))
        if not self.name:
            object.__setattr__(self, "name", kind.value)
        try:
            object.__setattr__(self, "base_price", to_money(self.base_price, "base_price"))
        except ValueError as e:
            raise InvalidPricingModelError(str(e), model_id=kind.value) from None
        if self.base_price < 0:
            raise InvalidPricingModelError("base_price must be non-negative", model_id=kind.value)
        _validate_tiers(kind, self.tiers)

    @property
    def covered_quantity(self) -> Optional[int]:
        """Highest number of units the tiers can hold, or None when unbounded."""
        return self.tiers[-1].end_quantity

    @property
    def is_unbounded(self) -> bool:
        """Whether every non-negative usage quantity can be allocated."""
        return self.tiers[-1].is_unbounded

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the model using the catalog field names."""
        return {
            "id": self.id.value,
            "name": self.name,
            "description": self.description,
            "base_price": self.base_price,
            "currency": self.currency,
            "tiers": [tier.to_dict() for tier in self.tiers],
        }


def _validate_tiers(kind: PricingModelKind, tiers: Iterable[Tier]) -> None:
    tiers = tuple(tiers)
    model_id = kind.value

    if not tiers:
        raise InvalidPricingModelError(f"Model '{model_id}' defines no tiers", model_id=model_id)
    for tier in tiers:
        if not isinstance(tier, Tier):
            raise InvalidPricingModelError(
                f"Model '{model_id}' has a tier of type {type(tier).__name__}, expected Tier",
                model_id=model_id,
            )

    ids = [tier.id for tier in tiers]
    if len(set(ids)) != len(ids):
        raise InvalidPricingModelError(f"Model '{model_id}' has duplicate tier ids: {ids}", model_id=model_id)

    if tiers[0].start_quantity not in (0, 1):
        raise InvalidPricingModelError(
            f"Model '{model_id}': first tier must start at 0 or 1, got {tiers[0].start_quantity}",
            model_id=model_id,
        )

    for previous, current in zip(tiers, tiers[1:]):
        if previous.end_quantity is None:
            raise InvalidPricingModelError(
                f"Model '{model_id}': unbounded tier {previous.id} must be the last tier",
                model_id=model_id,
            )
        expected_start = previous.end_quantity + 1
        if current.start_quantity < expected_start:
            raise InvalidPricingModelError(
                f"Model '{model_id}': tier {current.id} overlaps tier {previous.id} "
                f"(starts at {current.start_quantity}, expected {expected_start})",
                model_id=model_id,
            )
        if current.start_quantity > expected_start:
            raise InvalidPricingModelError(
                f"Model '{model_id}': gap between tier {previous.id} and tier {current.id} "
                f"(starts at {current.start_quantity}, expected {expected_start})",
                model_id=model_id,
            )

    if kind is PricingModelKind.PER_UNIT and (len(tiers) != 1 or not tiers[0].is_unbounded):
        raise InvalidPricingModelError(
            f"Model '{model_id}': per-unit pricing needs exactly one unbounded tier",
            model_id=model_id,
        )


def build_tier(data: Dict[str, Any], position: int) -> Tier:
    """Build a tier from a catalog mapping.

    Args:
        data: Mapping with catalog field names (``start_quantity`` and so on)
        position: 1-based position, used as the id when none is given

    Raises:
        ValueError: If a field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"tier #{position} must be a mapping, got {type(data).__name__}")
    if "price_per_unit" not in data:
        raise ValueError(f"tier #{position} is missing 'price_per_unit'")
    tier_id = data.get("id", position)
    return Tier(
        id=int(tier_id),
        name=str(data.get("name") or ""),
        start_quantity=data.get("start_quantity", 0),
        end_quantity=data.get("end_quantity"),
        price_per_unit=data["price_per_unit"],
        flat_fee=data.get("flat_fee") or 0,
    )


def build_model(model_id: str, data: Dict[str, Any]) -> PricingModel:
    """Build a pricing model from a catalog entry.

    Raises:
        InvalidPricingModelError: If the entry does not describe a valid model
    """
    if not isinstance(data, dict):
        raise InvalidPricingModelError(
            f"Model '{model_id}' must be a mapping, got {type(data).__name__}",
            model_id=model_id,
        )
    raw_tiers = data.get("tiers")
    if not isinstance(raw_tiers, list):
        raise InvalidPricingModelError(f"Model '{model_id}' must define a list of tiers", model_id=model_id)
    try:
        tiers = tuple(build_tier(tier_data, index) for index, tier_data in enumerate(raw_tiers, start=1))
    except (TypeError, ValueError) as e:
        raise InvalidPricingModelError(f"Model '{model_id}': {e}", model_id=model_id) from None

    return PricingModel(
        id=model_id,  # type: ignore[arg-type]
        tiers=tiers,
        base_price=data.get("base_price") or 0,
        name=str(data.get("name") or ""),
        description=str(data.get("description") or ""),
        currency=str(data.get("currency") or "USD"),
    )


__all__ = [
    "Money",
    "PricingModel",
    "PricingModelKind",
    "Tier",
    "build_model",
    "build_tier",
    "round_money",
    "to_money",
]
