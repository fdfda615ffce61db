"""
Budget allocation engine.

Splits a total budget (integer cents) across enabled categories in
proportion to their effective weights.  Shares are floored to whole
cents and the cents lost to flooring are handed back by largest
fractional remainder, so the allocations always sum to the budget.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd
from loguru import logger

from wedding_budget.allocation.weights import (
    DEFAULT_BASE_WEIGHT,
    resolve_effective_weights,
    unique_ids,
)
from wedding_budget.core.contracts import Tier, TierMultipliers


@dataclass(frozen=True)
class AllocationInput:
    """
    Everything the engine needs for one allocation.

    ``enabled_category_ids`` order matters: it breaks ties between equal
    rounding remainders.
    """

    total_budget_cents: int
    enabled_category_ids: Sequence[str] = ()
    base_weights: Mapping[str, float] = field(default_factory=dict)
    tier_by_category_id: Mapping[str, Any] = field(default_factory=dict)
    tier_multipliers: TierMultipliers | Mapping[str, float] | None = None
    default_base_weight: float = DEFAULT_BASE_WEIGHT

    def with_total(self, total_budget_cents: int) -> "AllocationInput":
        return replace(self, total_budget_cents=total_budget_cents)

    def with_enabled(self, enabled_category_ids: Iterable[str]) -> "AllocationInput":
        return replace(self, enabled_category_ids=tuple(enabled_category_ids))

    def with_tier(self, category_id: str, tier: Tier | str) -> "AllocationInput":
        tiers = dict(self.tier_by_category_id)
        tiers[category_id] = tier
        return replace(self, tier_by_category_id=tiers)


@dataclass(frozen=True)
class RemainderEntry:
    """Fractional cent lost when flooring one category's raw allocation."""

    category_id: str
    remainder: float

    def to_dict(self) -> dict:
        return {"category_id": self.category_id, "remainder": self.remainder}


@dataclass
class AllocationDiagnostics:
    """
    Intermediate values of an allocation, for auditing and tests.

    ``rounding_remainders`` is in distribution order (largest first).
    """

    sum_effective_weights: float = 0.0
    effective_weights_by_category_id: dict[str, float] = field(default_factory=dict)
    shares_by_category_id: dict[str, float] = field(default_factory=dict)
    rounding_remainders: list[RemainderEntry] = field(default_factory=list)
    equal_split_fallback: bool = False

    def to_dict(self) -> dict:
        return {
            "sum_effective_weights": self.sum_effective_weights,
            "effective_weights_by_category_id": self.effective_weights_by_category_id,
            "shares_by_category_id": self.shares_by_category_id,
            "rounding_remainders": [r.to_dict() for r in self.rounding_remainders],
            "equal_split_fallback": self.equal_split_fallback,
        }


@dataclass
class AllocationResult:
    """
    Results from a budget allocation.
    """

    allocations_by_category_id: dict[str, int] = field(default_factory=dict)
    diagnostics: AllocationDiagnostics = field(default_factory=AllocationDiagnostics)
    total_budget_cents: int = 0

    @property
    def total_allocated_cents(self) -> int:
        return sum(self.allocations_by_category_id.values())

    def to_dict(self) -> dict:
        return {
            "total_budget_cents": self.total_budget_cents,
            "total_allocated_cents": self.total_allocated_cents,
            "allocations_by_category_id": self.allocations_by_category_id,
            "diagnostics": self.diagnostics.to_dict(),
        }

    def to_frame(self) -> pd.DataFrame:
        """Per-category table of weights, shares, remainders and cents."""
        remainders = {r.category_id: r.remainder for r in self.diagnostics.rounding_remainders}
        records = [
            {
                "category_id": category_id,
                "effective_weight": self.diagnostics.effective_weights_by_category_id.get(category_id, 0.0),
                "share": self.diagnostics.shares_by_category_id.get(category_id, 0.0),
                "remainder": remainders.get(category_id, 0.0),
                "allocated_cents": cents,
            }
            for category_id, cents in self.allocations_by_category_id.items()
        ]
        return pd.DataFrame(
            records,
            columns=["category_id", "effective_weight", "share", "remainder", "allocated_cents"],
        )

    def save(self, path: Path | str) -> None:
        """Save results to JSON, with the per-category table alongside as CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        self.to_frame().to_csv(path.with_suffix(".csv"), index=False)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def compute_shares(
    effective_weights: Mapping[str, float],
    sum_effective_weights: float,
) -> tuple[dict[str, float], bool]:
    """
    Turn effective weights into shares of the budget.

    When the weights sum to zero every category gets an equal share.

    Returns:
        (category -> share, whether the equal-split fallback was used)
    """
    if not effective_weights:
        return {}, False

    if sum_effective_weights == 0:
        n = len(effective_weights)
        logger.warning(
            f"Effective weights sum to zero across {n} categories; "
            "falling back to an equal split"
        )
        return {category_id: 1.0 / n for category_id in effective_weights}, True

    return {
        category_id: weight / sum_effective_weights
        for category_id, weight in effective_weights.items()
    }, False


def floor_allocations(
    shares: Mapping[str, float],
    total_budget_cents: int,
) -> tuple[dict[str, int], dict[str, float]]:
    """
    Floor each category's proportional share to whole cents.

    Returns:
        (category -> floored cents, category -> fractional remainder)
    """
    floors: dict[str, int] = {}
    remainders: dict[str, float] = {}

    for category_id, share in shares.items():
        raw = share * total_budget_cents
        floored = math.floor(raw)
        floors[category_id] = floored
        remainders[category_id] = raw - floored

    return floors, remainders


def rank_remainders(remainders: Mapping[str, float]) -> list[RemainderEntry]:
    """Positive remainders, largest first; ties keep supplied order."""
    ranked = sorted(
        (
            (position, category_id, remainder)
            for position, (category_id, remainder) in enumerate(remainders.items())
            if remainder > 0
        ),
        key=lambda item: (-item[2], item[0]),
    )
    return [RemainderEntry(category_id, remainder) for _, category_id, remainder in ranked]


def distribute_remainder(
    floors: Mapping[str, int],
    remainders: Mapping[str, float],
    total_budget_cents: int,
) -> tuple[dict[str, int], list[RemainderEntry]]:
    """
    Hand out the cents lost to flooring, one per category, by largest
    remainder, until the allocations sum to ``total_budget_cents``.

    Returns:
        (category -> final cents, ranked remainder list)
    """
    allocations = dict(floors)
    ranked = rank_remainders(remainders)
    remaining = total_budget_cents - sum(allocations.values())

    for entry in ranked:
        if remaining <= 0:
            break
        allocations[entry.category_id] += 1
        remaining -= 1

    if remaining > 0 and allocations:
        # Float drift left more cents than positive remainders
        cycle = [entry.category_id for entry in ranked] or list(allocations)
        logger.debug(f"{remaining} cents left after remainder walk; cycling")
        i = 0
        while remaining > 0:
            allocations[cycle[i % len(cycle)]] += 1
            remaining -= 1
            i += 1

    elif remaining < 0:
        # Float drift pushed the floors past the total
        logger.debug(f"Floors exceed total by {-remaining} cents; taking back")
        ascending = [
            category_id
            for _, category_id in sorted(
                enumerate(allocations),
                key=lambda item: (remainders.get(item[1], 0.0), item[0]),
            )
        ]
        i = 0
        while remaining < 0 and any(v > 0 for v in allocations.values()):
            category_id = ascending[i % len(ascending)]
            if allocations[category_id] > 0:
                allocations[category_id] -= 1
                remaining += 1
            i += 1

    return allocations, ranked


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def calculate_allocations(allocation_input: AllocationInput) -> AllocationResult:
    """
    Allocate a budget across enabled categories.

    Args:
        allocation_input: Budget, categories, weights and tiers

    Returns:
        AllocationResult with integer-cent allocations that sum exactly
        to the budget (for a non-empty category set) plus diagnostics
    """
    total = allocation_input.total_budget_cents
    category_ids = unique_ids(allocation_input.enabled_category_ids)

    if not category_ids:
        return AllocationResult(total_budget_cents=total)

    effective, sum_effective = resolve_effective_weights(
        category_ids,
        allocation_input.base_weights,
        allocation_input.tier_by_category_id,
        allocation_input.tier_multipliers,
        default_base_weight=allocation_input.default_base_weight,
    )

    shares, equal_split = compute_shares(effective, sum_effective)
    floors, remainders = floor_allocations(shares, total)
    allocations, ranked = distribute_remainder(floors, remainders, total)

    logger.debug(
        f"Allocated {total} cents across {len(allocations)} categories "
        f"({len(ranked)} positive remainders)"
    )

    return AllocationResult(
        allocations_by_category_id=allocations,
        diagnostics=AllocationDiagnostics(
            sum_effective_weights=sum_effective,
            effective_weights_by_category_id=effective,
            shares_by_category_id=shares,
            rounding_remainders=ranked,
            equal_split_fallback=equal_split,
        ),
        total_budget_cents=total,
    )


def allocate_budget(
    total_budget_cents: int,
    enabled_category_ids: Iterable[str],
    base_weights: Mapping[str, float] | None = None,
    tier_by_category_id: Mapping[str, Any] | None = None,
    tier_multipliers: TierMultipliers | Mapping[str, float] | None = None,
) -> AllocationResult:
    """
    Convenience function for a one-off allocation.

    Args:
        total_budget_cents: Budget to split, in cents
        enabled_category_ids: Categories to fund, in tie-break order
        base_weights: Category -> base weight (missing -> 0.3)
        tier_by_category_id: Category -> tier (missing -> IMPORTANT)
        tier_multipliers: Whole multiplier table override

    Returns:
        AllocationResult
    """
    return calculate_allocations(
        AllocationInput(
            total_budget_cents=total_budget_cents,
            enabled_category_ids=tuple(enabled_category_ids),
            base_weights=dict(base_weights or {}),
            tier_by_category_id=dict(tier_by_category_id or {}),
            tier_multipliers=tier_multipliers,
        )
    )
