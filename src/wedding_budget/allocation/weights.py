"""
Effective weight resolution.

Scales each enabled category's base weight by the multiplier of its
priority tier.  Missing base weights and missing or unrecognised tiers
fall back to module defaults; multipliers are taken as given.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from loguru import logger

from wedding_budget.core.contracts import DEFAULT_TIER_MULTIPLIERS, Tier, TierMultipliers

# Base weight for categories without one (custom categories)
DEFAULT_BASE_WEIGHT = 0.3

DEFAULT_TIER = Tier.IMPORTANT


def resolve_tier(value: Any) -> Tier:
    """
    Coerce a tier label to ``Tier``, defaulting to IMPORTANT.

    Labels must match a tier name exactly: ``"top"`` is not TOP and
    resolves to IMPORTANT like any other unknown label.  Plan files
    normalise case before their tiers reach the engine.
    """
    if isinstance(value, Tier):
        return value
    if isinstance(value, str):
        try:
            return Tier(value)
        except ValueError:
            pass
    return DEFAULT_TIER


def resolve_multipliers(
    tier_multipliers: TierMultipliers | Mapping[str, float] | None,
) -> TierMultipliers:
    """Return the multiplier table to use; a mapping must be complete."""
    if tier_multipliers is None:
        return DEFAULT_TIER_MULTIPLIERS
    if isinstance(tier_multipliers, TierMultipliers):
        return tier_multipliers
    return TierMultipliers.model_validate(dict(tier_multipliers))


def unique_ids(category_ids: Iterable[str]) -> list[str]:
    """Category ids in first-seen order with duplicates removed."""
    return list(dict.fromkeys(category_ids))


def resolve_effective_weights(
    enabled_category_ids: Iterable[str],
    base_weights: Mapping[str, float] | None = None,
    tier_by_category_id: Mapping[str, Any] | None = None,
    tier_multipliers: TierMultipliers | Mapping[str, float] | None = None,
    default_base_weight: float = DEFAULT_BASE_WEIGHT,
) -> tuple[dict[str, float], float]:
    """
    Compute effective weights for enabled categories.

    Args:
        enabled_category_ids: Categories to weight, in caller order
        base_weights: Category -> base weight (sparse)
        tier_by_category_id: Category -> tier label (sparse)
        tier_multipliers: Whole multiplier table override
        default_base_weight: Base weight for categories missing one

    Returns:
        (category -> effective weight, sum of effective weights)
    """
    base_weights = base_weights or {}
    tier_by_category_id = tier_by_category_id or {}
    multipliers = resolve_multipliers(tier_multipliers)

    effective: dict[str, float] = {}
    total = 0.0

    for category_id in unique_ids(enabled_category_ids):
        base = base_weights.get(category_id)
        if base is None:
            base = default_base_weight
        tier = resolve_tier(tier_by_category_id.get(category_id))

        weight = base * multipliers.multiplier_for(tier)
        effective[category_id] = weight
        total += weight

    logger.debug(f"Resolved {len(effective)} effective weights, sum={total:.6f}")

    return effective, total
