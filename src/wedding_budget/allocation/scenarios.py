"""
Scenario planning utilities for budget allocation.

Create and compare different budget scenarios to support
what-if analysis ("what if we spend 10% more?", "what if
photography becomes a top priority?").
"""

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd
from loguru import logger

from wedding_budget.allocation.allocator import AllocationInput, calculate_allocations
from wedding_budget.allocation.weights import unique_ids
from wedding_budget.core.contracts import Tier

DEFAULT_BUDGET_MULTIPLIERS = [0.8, 0.9, 1.0, 1.1, 1.2]


@dataclass
class BudgetScenario:
    """
    A budget scenario for comparison.
    """

    name: str
    description: str
    total_budget_cents: int
    allocation: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "total_budget_cents": self.total_budget_cents,
            "allocation": self.allocation,
        }


def parse_budget_multipliers(raw: str) -> list[float]:
    """
    Parse a comma-separated multiplier list such as ``"0.9,1.0,1.1"``.

    Raises:
        ValueError: If an entry is not a finite number
    """
    multipliers = [float(m) for m in raw.split(",") if m.strip()]

    for mult in multipliers:
        if not math.isfinite(mult):
            raise ValueError(f"Budget multiplier must be finite, got {mult}")

    return multipliers


def _scaled_total(total_budget_cents: int, multiplier: float) -> int:
    if not math.isfinite(multiplier):
        raise ValueError(f"Budget multiplier must be finite, got {multiplier}")
    return max(0, int(round(total_budget_cents * multiplier)))


def create_budget_scenarios(
    allocation_input: AllocationInput,
    budget_multipliers: list[float] | None = None,
) -> list[BudgetScenario]:
    """
    Create scenarios at different total budget levels.

    Args:
        allocation_input: Base allocation (categories, weights, tiers)
        budget_multipliers: Scale factors for the total (e.g., [0.9, 1.0, 1.1])

    Returns:
        List of BudgetScenario objects, one per multiplier
    """
    if budget_multipliers is None:
        budget_multipliers = DEFAULT_BUDGET_MULTIPLIERS

    scenarios = []

    for mult in budget_multipliers:
        total = _scaled_total(allocation_input.total_budget_cents, mult)
        result = calculate_allocations(allocation_input.with_total(total))

        scenarios.append(BudgetScenario(
            name=f"Budget ({mult:.0%})",
            description=f"Allocation at {mult:.0%} of base budget",
            total_budget_cents=total,
            allocation=result.allocations_by_category_id,
        ))

    logger.debug(f"Created {len(scenarios)} budget scenarios")

    return scenarios


def create_tier_shift_scenarios(
    allocation_input: AllocationInput,
    category_id: str,
) -> list[BudgetScenario]:
    """
    Create scenarios moving one category through every tier.

    The first scenario is the allocation as given.

    Args:
        allocation_input: Base allocation
        category_id: Category whose tier changes

    Returns:
        List of scenarios: current, then TOP, IMPORTANT, NICE
    """
    current = calculate_allocations(allocation_input)

    scenarios = [BudgetScenario(
        name="Current",
        description="Allocation with current tiers",
        total_budget_cents=allocation_input.total_budget_cents,
        allocation=current.allocations_by_category_id,
    )]

    for tier in Tier:
        result = calculate_allocations(allocation_input.with_tier(category_id, tier))

        scenarios.append(BudgetScenario(
            name=f"{category_id} {tier.value}",
            description=f"{category_id} set to {tier.value}",
            total_budget_cents=allocation_input.total_budget_cents,
            allocation=result.allocations_by_category_id,
        ))

    return scenarios


def compare_scenarios(
    scenarios: list[BudgetScenario],
) -> pd.DataFrame:
    """
    Create a comparison table of scenarios.

    Args:
        scenarios: List of BudgetScenario objects

    Returns:
        DataFrame with one row per scenario, one column per category and
        changes relative to the first scenario: the budget total
        (``budget_change_vs_base_cents``) and each category
        (``<category>_change_cents``)
    """
    records = []

    # Categories in first-seen order
    all_categories = unique_ids(
        category_id for s in scenarios for category_id in s.allocation
    )

    for scenario in scenarios:
        record = {
            "scenario": scenario.name,
            "description": scenario.description,
            "total_budget_cents": scenario.total_budget_cents,
        }

        for category_id in all_categories:
            record[f"{category_id}_cents"] = scenario.allocation.get(category_id, 0)

        records.append(record)

    df = pd.DataFrame(records)

    if len(df) > 0:
        base_total = df["total_budget_cents"].iloc[0]
        df["budget_change_vs_base_cents"] = df["total_budget_cents"] - base_total

        for category_id in all_categories:
            cents = df[f"{category_id}_cents"]
            df[f"{category_id}_change_cents"] = cents - cents.iloc[0]

    return df


def compute_budget_frontier(
    allocation_input: AllocationInput,
    budget_range: tuple[int, int],
    n_points: int = 10,
) -> pd.DataFrame:
    """
    Compute allocations at evenly spaced budget levels.

    Args:
        allocation_input: Base allocation
        budget_range: (min_budget_cents, max_budget_cents)
        n_points: Number of budget levels

    Returns:
        DataFrame with budget, per-category cents and percent of budget
    """
    budgets = np.linspace(budget_range[0], budget_range[1], n_points)

    records = []

    for budget in budgets:
        total = int(round(budget))
        result = calculate_allocations(allocation_input.with_total(total))

        record = {"budget_cents": total}

        for category_id, cents in result.allocations_by_category_id.items():
            record[f"{category_id}_cents"] = cents
            record[f"{category_id}_pct"] = cents / total * 100 if total > 0 else 0.0

        records.append(record)

    return pd.DataFrame(records)
