"""Usage-based cost calculation.

The engine walks a model's tiers from the lowest upward and places as many
units as each tier can hold before moving on (graduated billing). Flat fees
apply only to tiers that receive at least one unit. The base price is added
regardless of usage.

Typical usage:

    from pricing_model_registry import PricingRegistry, calculate

    registry = PricingRegistry()
    breakdown = calculate(registry.get_model("tiered"), 2500)
    print(breakdown.total_cost)  # Decimal('35.00')
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from .errors import InvalidInputError, UnallocatableUsageError
from .logging import LogEvent, log_debug
from .pricing import Money, PricingModel, PricingModelKind, round_money


@dataclass(frozen=True)
class TierCharge:
    """Units placed in a single tier and what they cost."""

    tier_id: int
    tier_name: str
    units_allocated: int
    unit_price: Money
    flat_fee: Money
    tier_cost: Money

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the charge for JSON output, with amounts in whole cents."""
        return {
            "tier_id": self.tier_id,
            "tier_name": self.tier_name,
            "units_allocated": self.units_allocated,
            "unit_price": self.unit_price,
            "flat_fee": round_money(self.flat_fee),
            "tier_cost": round_money(self.tier_cost),
        }


@dataclass(frozen=True)
class CostBreakdown:
    """Itemized result of a calculation.

    ``total_cost`` always equals ``base_fee`` plus the sum of every
    ``tier_cost`` in ``charges``.
    """

    model_id: PricingModelKind
    quantity: int
    base_fee: Money
    charges: Tuple[TierCharge, ...]
    total_cost: Money
    currency: str = "USD"

    @property
    def usage_cost(self) -> Money:
        """Cost of the usage alone, without the base fee."""
        return sum((charge.tier_cost for charge in self.charges), Decimal("0"))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the breakdown for JSON output.

        Amounts are rounded to cents; the breakdown itself keeps exact values.
        """
        return {
            "model_id": self.model_id.value,
            "quantity": self.quantity,
            "currency": self.currency,
            "base_fee": round_money(self.base_fee),
            "usage_cost": round_money(self.usage_cost),
            "total_cost": round_money(self.total_cost),
            "charges": [charge.to_dict() for charge in self.charges],
        }


def _validate_quantity(quantity: Any) -> int:
    # bool is an int subclass but never a meaningful usage count
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInputError(
            f"Usage quantity must be an integer, got {type(quantity).__name__}",
            param_name="quantity",
            value=quantity,
        )
    if quantity < 0:
        raise InvalidInputError(
            f"Usage quantity must be non-negative, got {quantity}",
            param_name="quantity",
            value=quantity,
        )
    return quantity


def calculate(model: PricingModel, quantity: int) -> CostBreakdown:
    """Calculate the cost of a usage quantity under a pricing model.

    Args:
        model: A validated pricing model
        quantity: Units consumed in the billing period

    Returns:
        CostBreakdown with one charge per tier that received units

    Raises:
        InvalidInputError: If quantity is negative or not an integer
        UnallocatableUsageError: If the model's tiers cannot hold the quantity
    """
    quantity = _validate_quantity(quantity)

    remaining = quantity
    base_fee = model.base_price
    total_cost = base_fee
    charges: List[TierCharge] = []

    for tier in model.tiers:
        if remaining <= 0:
            break

        capacity = tier.capacity if tier.capacity is not None else remaining
        units = min(remaining, capacity)
        if units <= 0:
            continue

        tier_cost = units * tier.price_per_unit + tier.flat_fee
        charges.append(
            TierCharge(
                tier_id=tier.id,
                tier_name=tier.name,
                units_allocated=units,
                unit_price=tier.price_per_unit,
                flat_fee=tier.flat_fee,
                tier_cost=tier_cost,
            )
        )
        total_cost += tier_cost
        remaining -= units

    if remaining > 0:
        covered = quantity - remaining
        raise UnallocatableUsageError(
            f"Model '{model.id.value}' covers at most {covered} units; "
            f"{remaining} of {quantity} units cannot be allocated to any tier",
            model_id=model.id.value,
            quantity=quantity,
            covered_quantity=covered,
        )

    log_debug(
        LogEvent.PRICING_CALCULATION,
        "Calculated cost",
        model=model.id.value,
        quantity=quantity,
        tiers_used=len(charges),
        total_cost=str(total_cost),
    )

    return CostBreakdown(
        model_id=model.id,
        quantity=quantity,
        base_fee=base_fee,
        charges=tuple(charges),
        total_cost=total_cost,
        currency=model.currency,
    )
