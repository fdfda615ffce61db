"""
Allocation plan loading.

A plan file holds the total budget, the categories with their tiers
and optional base weights, and an optional multiplier table.  YAML
(``.yaml``/``.yml``) and JSON (``.json``) are supported.

Example plan::

    total_budget_cents: 3000000
    categories:
      - id: cat_001          # catalog id, base weight from the catalog
        tier: TOP
      - id: photo_booth      # custom category
        base_weight: 0.05
        tier: NICE
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TYPE_CHECKING

import yaml
from loguru import logger
from pydantic import ValidationError

from wedding_budget.core.contracts import AllocationPlan
from wedding_budget.core.exceptions import PlanValidationError

if TYPE_CHECKING:
    from wedding_budget.allocation.allocator import AllocationInput
    from wedding_budget.config import WeddingBudgetConfig

_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_plan(data: Any) -> AllocationPlan:
    """Validate raw plan data into an ``AllocationPlan``."""
    if not isinstance(data, dict):
        raise PlanValidationError("Plan must be a mapping at the top level")
    try:
        return AllocationPlan.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise PlanValidationError(f"Invalid plan: {field}: {first['msg']}", field=field) from e


def load_plan(path: Path | str) -> AllocationPlan:
    """
    Load and validate a plan file.

    Raises:
        PlanValidationError: unreadable file, bad syntax or invalid content
    """
    path = Path(path)

    try:
        text = path.read_text()
    except OSError as e:
        raise PlanValidationError(f"Cannot read plan file {path}: {e}") from e

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PlanValidationError(f"Cannot parse plan file {path}: {e}") from e

    plan = parse_plan(data)
    logger.debug(f"Loaded plan {path}: {len(plan.categories)} categories")
    return plan


def plan_to_input(plan: AllocationPlan, config: "WeddingBudgetConfig") -> "AllocationInput":
    """Engine input for a plan, with config supplying the defaults."""
    return plan.to_allocation_input(
        default_tier_multipliers=config.allocation.tier_multipliers,
        default_base_weight=config.allocation.default_base_weight,
    )


def save_plan(plan: AllocationPlan, path: Path | str) -> None:
    """Write a plan as YAML or JSON depending on the suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = plan.model_dump(mode="json", exclude_none=True)

    with open(path, "w") as f:
        if path.suffix.lower() in _YAML_SUFFIXES:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
