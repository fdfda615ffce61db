"""
Budget allocation layer for wedding-budget.

Splits a total budget into integer-cent category allocations from
base weights and priority tiers, validates top-priority counts and
builds what-if scenarios.
"""

from wedding_budget.allocation.allocator import (
    AllocationDiagnostics,
    AllocationInput,
    AllocationResult,
    RemainderEntry,
    allocate_budget,
    calculate_allocations,
)
from wedding_budget.allocation.priorities import (
    PriorityValidation,
    validate_priority_count,
)
from wedding_budget.allocation.scenarios import (
    BudgetScenario,
    compare_scenarios,
    create_budget_scenarios,
    create_tier_shift_scenarios,
    parse_budget_multipliers,
)
from wedding_budget.allocation.weights import (
    DEFAULT_BASE_WEIGHT,
    resolve_effective_weights,
    resolve_tier,
)

__all__ = [
    "AllocationDiagnostics",
    "AllocationInput",
    "AllocationResult",
    "RemainderEntry",
    "allocate_budget",
    "calculate_allocations",
    "PriorityValidation",
    "validate_priority_count",
    "BudgetScenario",
    "compare_scenarios",
    "create_budget_scenarios",
    "create_tier_shift_scenarios",
    "parse_budget_multipliers",
    "DEFAULT_BASE_WEIGHT",
    "resolve_effective_weights",
    "resolve_tier",
]
