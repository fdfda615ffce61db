"""
Core contracts and exceptions shared by every layer of wedding-budget.
"""

from wedding_budget.core.contracts import (
    AllocationPlan,
    CategoryGroup,
    PlanCategory,
    Tier,
    TierMultipliers,
)
from wedding_budget.core.exceptions import (
    ConfigError,
    PlanValidationError,
    UnknownCategoryError,
    WeddingBudgetError,
)

__all__ = [
    "AllocationPlan",
    "CategoryGroup",
    "PlanCategory",
    "Tier",
    "TierMultipliers",
    "ConfigError",
    "PlanValidationError",
    "UnknownCategoryError",
    "WeddingBudgetError",
]
