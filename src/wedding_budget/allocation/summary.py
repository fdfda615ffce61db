"""
Grouped allocation summaries for dashboards and reports.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from wedding_budget.allocation.allocator import AllocationResult
from wedding_budget.catalog import MASTER_CATEGORIES, Category

CUSTOM_GROUP = "CUSTOM"

SUMMARY_COLUMNS = ["group", "category_id", "name", "allocated_cents", "share_of_budget"]


def summarize_allocations(
    result: AllocationResult,
    categories: Iterable[Category] | None = None,
) -> pd.DataFrame:
    """
    Join allocations to category names and groups.

    Ids missing from ``categories`` (the master catalog by default) are
    reported under the CUSTOM group with the id as name.
    """
    lookup = {c.id: c for c in (categories if categories is not None else MASTER_CATEGORIES)}
    total = result.total_budget_cents

    records = []
    for category_id, cents in result.allocations_by_category_id.items():
        cat = lookup.get(category_id)
        records.append({
            "group": cat.group.value if cat else CUSTOM_GROUP,
            "category_id": category_id,
            "name": cat.name if cat else category_id,
            "allocated_cents": cents,
            "share_of_budget": cents / total if total > 0 else 0.0,
        })

    return pd.DataFrame(records, columns=SUMMARY_COLUMNS)


def group_totals(
    result: AllocationResult,
    categories: Iterable[Category] | None = None,
) -> dict[str, int]:
    """Allocated cents per group, groups in first-seen order."""
    df = summarize_allocations(result, categories)
    if df.empty:
        return {}
    totals = df.groupby("group", sort=False)["allocated_cents"].sum()
    return {group: int(cents) for group, cents in totals.items()}
