"""
wedding-budget: Wedding Budget Planning Toolkit

Splits a total wedding budget across enabled spending categories using
base weights and priority tiers, with exact integer-cent reconstruction.

Quickstart::

    from wedding_budget.allocation import allocate_budget
    result = allocate_budget(
        total_budget_cents=3_000_000,
        enabled_category_ids=["venue", "catering", "florals"],
        base_weights={"venue": 0.25, "catering": 0.20, "florals": 0.15},
        tier_by_category_id={"venue": "TOP", "florals": "NICE"},
    )
    result.allocations_by_category_id
"""

__version__ = "0.1.0"
