"""
Top-priority count validation.

Couples pick a handful of TOP categories before allocating.  The check
is advisory: callers decide whether an invalid count blocks allocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from loguru import logger

from wedding_budget.allocation.weights import resolve_tier, unique_ids
from wedding_budget.core.contracts import Tier

MIN_TOP_PRIORITIES = 3
MAX_TOP_PRIORITIES = 5


@dataclass(frozen=True)
class PriorityValidation:
    is_valid: bool
    top_count: int
    message: str

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "top_count": self.top_count,
            "message": self.message,
        }


def count_top_priorities(
    tier_by_category_id: Mapping[str, Any],
    enabled_category_ids: Iterable[str],
) -> int:
    return sum(
        1
        for category_id in unique_ids(enabled_category_ids)
        if resolve_tier(tier_by_category_id.get(category_id)) is Tier.TOP
    )


def validate_priority_count(
    tier_by_category_id: Mapping[str, Any],
    enabled_category_ids: Iterable[str],
    min_top: int = MIN_TOP_PRIORITIES,
    max_top: int = MAX_TOP_PRIORITIES,
) -> PriorityValidation:
    """
    Check that the number of enabled TOP categories is within
    ``[min_top, max_top]``.

    Args:
        tier_by_category_id: Category -> tier label
        enabled_category_ids: Enabled categories (others are ignored)
        min_top: Fewest TOP categories allowed
        max_top: Most TOP categories allowed

    Returns:
        PriorityValidation with a message suitable for display
    """
    top_count = count_top_priorities(tier_by_category_id, enabled_category_ids)

    if top_count < min_top:
        result = PriorityValidation(
            is_valid=False,
            top_count=top_count,
            message=f"Please select at least {min_top} top priorities (currently {top_count})",
        )
    elif top_count > max_top:
        result = PriorityValidation(
            is_valid=False,
            top_count=top_count,
            message=f"Please select at most {max_top} top priorities (currently {top_count})",
        )
    else:
        result = PriorityValidation(
            is_valid=True,
            top_count=top_count,
            message="Priority count is valid",
        )

    if not result.is_valid:
        logger.debug(result.message)

    return result
