"""
Canonical data contracts for wedding-budget.

These Pydantic models define every serialisable boundary of the toolkit:
plan files, API payloads and the tier multiplier table.  The allocation
engine works on plain mappings; the contracts here validate user input
before it reaches the engine and convert it into an ``AllocationInput``.

Design principles:
  - Money is always an integer number of cents.
  - Base weights live in (0, 1].
  - A multiplier table is replaced as a whole, never patched per tier.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from wedding_budget.allocation.allocator import AllocationInput


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Tier(str, Enum):
    """Priority tier a couple assigns to a category."""

    TOP = "TOP"
    IMPORTANT = "IMPORTANT"
    NICE = "NICE"


class CategoryGroup(str, Enum):
    CORE = "CORE"
    ADMIN = "ADMIN"
    ENHANCEMENTS = "ENHANCEMENTS"
    SAFETY_NET = "SAFETY_NET"
    FLEX = "FLEX"


# ---------------------------------------------------------------------------
# Tier multipliers
# ---------------------------------------------------------------------------

class TierMultipliers(BaseModel):
    """
    Multiplier applied to a category's base weight for each tier.

    All three entries are required so an override always replaces the
    complete table.  Keys may be given as tier names (``TOP``) or field
    names (``top``).  Values must be finite; zero and negative values
    are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    top: float
    important: float
    nice: float

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                (k.value if isinstance(k, Tier) else str(k)).lower(): v
                for k, v in data.items()
            }
        return data

    def multiplier_for(self, tier: Tier) -> float:
        return getattr(self, tier.value.lower())

    def as_dict(self) -> dict[str, float]:
        return {tier.value: self.multiplier_for(tier) for tier in Tier}


DEFAULT_TIER_MULTIPLIERS = TierMultipliers(top=1.4, important=1.0, nice=0.7)


# ---------------------------------------------------------------------------
# Plan contracts  (what users feed into the toolkit)
# ---------------------------------------------------------------------------

class PlanCategory(BaseModel):
    """One category line of an allocation plan."""

    id: str = Field(min_length=1, max_length=120)
    base_weight: float | None = Field(default=None, gt=0, le=1)
    tier: Tier = Field(default=Tier.IMPORTANT)
    enabled: bool = Field(default=True)

    @field_validator("tier", mode="before")
    @classmethod
    def _coerce_tier(cls, v: Any) -> Any:
        if v is None:
            return Tier.IMPORTANT
        if isinstance(v, str):
            return v.strip().upper()
        return v


class AllocationPlan(BaseModel):
    """
    A complete allocation request: total budget, categories and an
    optional multiplier table override.
    """

    total_budget_cents: int = Field(ge=0)
    categories: list[PlanCategory] = Field(default_factory=list)
    tier_multipliers: TierMultipliers | None = Field(default=None)

    @field_validator("categories")
    @classmethod
    def _unique_ids(cls, v: list[PlanCategory]) -> list[PlanCategory]:
        seen: set[str] = set()
        for cat in v:
            if cat.id in seen:
                raise ValueError(f"Duplicate category id '{cat.id}'")
            seen.add(cat.id)
        return v

    @property
    def enabled_category_ids(self) -> list[str]:
        return [c.id for c in self.categories if c.enabled]

    @property
    def tier_by_category_id(self) -> dict[str, Tier]:
        return {c.id: c.tier for c in self.categories if c.enabled}

    def resolved_base_weights(self, use_catalog: bool = True) -> dict[str, float]:
        """
        Base weights for enabled categories.

        Missing weights are taken from the master catalog when the id is
        a catalog id; anything else is left out so the engine default
        applies.
        """
        from wedding_budget.catalog import default_base_weights

        catalog_weights = default_base_weights() if use_catalog else {}
        weights: dict[str, float] = {}
        for cat in self.categories:
            if not cat.enabled:
                continue
            if cat.base_weight is not None:
                weights[cat.id] = cat.base_weight
            elif cat.id in catalog_weights:
                weights[cat.id] = catalog_weights[cat.id]
        return weights

    def to_allocation_input(
        self,
        use_catalog: bool = True,
        default_tier_multipliers: TierMultipliers | None = None,
        default_base_weight: float | None = None,
    ) -> "AllocationInput":
        """
        Build the engine input (disabled categories excluded).

        The plan's own multiplier table wins over ``default_tier_multipliers``.
        """
        from wedding_budget.allocation.allocator import AllocationInput
        from wedding_budget.allocation.weights import DEFAULT_BASE_WEIGHT

        return AllocationInput(
            total_budget_cents=self.total_budget_cents,
            enabled_category_ids=tuple(self.enabled_category_ids),
            base_weights=self.resolved_base_weights(use_catalog=use_catalog),
            tier_by_category_id=self.tier_by_category_id,
            tier_multipliers=self.tier_multipliers or default_tier_multipliers,
            default_base_weight=(
                DEFAULT_BASE_WEIGHT if default_base_weight is None else default_base_weight
            ),
        )
