"""
Master wedding category catalog.

Twenty-seven global categories in five groups, each with the base weight
used when a plan does not supply its own.
"""

from __future__ import annotations

from dataclasses import dataclass

from wedding_budget.core.contracts import CategoryGroup
from wedding_budget.core.exceptions import UnknownCategoryError


@dataclass(frozen=True)
class Category:
    """A catalog category."""

    id: str
    name: str
    group: CategoryGroup
    base_weight: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "group": self.group.value,
            "base_weight": self.base_weight,
        }


MASTER_CATEGORIES: tuple[Category, ...] = (
    # Core
    Category("cat_001", "Venue & Rentals", CategoryGroup.CORE, 0.20),
    Category("cat_002", "Catering / Food", CategoryGroup.CORE, 0.18),
    Category("cat_003", "Bar / Alcohol", CategoryGroup.CORE, 0.08),
    Category("cat_004", "Photography", CategoryGroup.CORE, 0.12),
    Category("cat_005", "Videography", CategoryGroup.CORE, 0.08),
    Category("cat_006", "Planner / Coordination", CategoryGroup.CORE, 0.06),
    Category("cat_007", "Attire", CategoryGroup.CORE, 0.08),
    Category("cat_008", "Florals", CategoryGroup.CORE, 0.07),
    Category("cat_009", "Music / Entertainment", CategoryGroup.CORE, 0.07),
    Category("cat_010", "Officiant", CategoryGroup.CORE, 0.01),
    Category("cat_011", "Cake / Desserts", CategoryGroup.CORE, 0.03),
    Category("cat_012", "Hair & Makeup", CategoryGroup.CORE, 0.02),
    # Admin
    Category("cat_013", "Taxes, Service Fees & Delivery", CategoryGroup.ADMIN, 0.06),
    Category("cat_014", "Tips / Gratuities", CategoryGroup.ADMIN, 0.05),
    Category("cat_015", "Permits & Licenses", CategoryGroup.ADMIN, 0.01),
    Category("cat_016", "Postage & Mailing", CategoryGroup.ADMIN, 0.01),
    Category("cat_017", "Insurance", CategoryGroup.ADMIN, 0.02),
    # Enhancements
    Category("cat_018", "Decor Enhancements (Non-floral)", CategoryGroup.ENHANCEMENTS, 0.04),
    Category("cat_019", "Signage & Stationery", CategoryGroup.ENHANCEMENTS, 0.01),
    Category("cat_020", "Lighting & Draping", CategoryGroup.ENHANCEMENTS, 0.03),
    Category("cat_021", "Transportation", CategoryGroup.ENHANCEMENTS, 0.03),
    Category("cat_022", "Guest Experience", CategoryGroup.ENHANCEMENTS, 0.02),
    Category("cat_023", "Favors", CategoryGroup.ENHANCEMENTS, 0.01),
    Category("cat_024", "Late-Night Snack", CategoryGroup.ENHANCEMENTS, 0.01),
    Category("cat_025", "Bridal Party Gifts", CategoryGroup.ENHANCEMENTS, 0.02),
    # Safety net
    Category("cat_026", "Contingency / Flex Fund", CategoryGroup.SAFETY_NET, 0.10),
    # Flex
    Category("cat_027", "Miscellaneous / Other", CategoryGroup.FLEX, 0.03),
)

_BY_ID: dict[str, Category] = {c.id: c for c in MASTER_CATEGORIES}


def list_categories(group: CategoryGroup | str | None = None) -> list[Category]:
    """List catalog categories, optionally restricted to one group."""
    if group is None:
        return list(MASTER_CATEGORIES)
    group = CategoryGroup(group.upper() if isinstance(group, str) else group)
    return [c for c in MASTER_CATEGORIES if c.group is group]


def get_category(category_id: str) -> Category:
    try:
        return _BY_ID[category_id]
    except KeyError:
        raise UnknownCategoryError(category_id) from None


def find_category(category_id: str) -> Category | None:
    return _BY_ID.get(category_id)


def default_base_weights() -> dict[str, float]:
    """Catalog id -> base weight."""
    return {c.id: c.base_weight for c in MASTER_CATEGORIES}


def categories_by_group() -> dict[CategoryGroup, list[Category]]:
    """Catalog categories keyed by group, groups in declaration order."""
    grouped: dict[CategoryGroup, list[Category]] = {g: [] for g in CategoryGroup}
    for cat in MASTER_CATEGORIES:
        grouped[cat.group].append(cat)
    return grouped
