"""
FastAPI application for wedding-budget.

Design principles:
  - Stateless: every request carries its own plan; nothing is stored.
  - Pure computation on the hot path, no I/O beyond the request.
  - Errors from the toolkit come back as JSON with their code.
"""

from __future__ import annotations

import json
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from wedding_budget import __version__
from wedding_budget.allocation import (
    calculate_allocations,
    compare_scenarios,
    create_budget_scenarios,
    parse_budget_multipliers,
    validate_priority_count,
)
from wedding_budget.allocation.summary import group_totals
from wedding_budget.catalog import get_category, list_categories
from wedding_budget.config import WeddingBudgetConfig, get_config
from wedding_budget.core.contracts import AllocationPlan
from wedding_budget.core.exceptions import UnknownCategoryError, WeddingBudgetError
from wedding_budget.plans import plan_to_input


def _parse_multipliers(raw: str | None, default: list[float]) -> list[float]:
    if not raw:
        return default
    try:
        return parse_budget_multipliers(raw)
    except ValueError:
        raise HTTPException(422, f"Invalid multipliers: {raw}")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(config: WeddingBudgetConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    config = config or get_config()

    application = FastAPI(
        title="wedding-budget API",
        description="Weighted, tier-boosted wedding budget allocation.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(WeddingBudgetError)
    async def wedding_budget_error_handler(request: Request, exc: WeddingBudgetError):
        status = 404 if isinstance(exc, UnknownCategoryError) else 400
        return JSONResponse(status_code=status, content={"error": str(exc), "code": exc.code})

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    @application.get("/health")
    def health():
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "version": __version__,
        }

    @application.get("/")
    def root():
        return {
            "name": "wedding-budget API",
            "version": __version__,
            "docs": "/docs",
        }

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @application.get("/api/v1/categories")
    def get_categories(group: str | None = Query(default=None)):
        """Master category catalog, optionally filtered by group."""
        try:
            cats = list_categories(group)
        except ValueError:
            raise HTTPException(404, f"Group '{group}' not found")
        return {"categories": [c.to_dict() for c in cats]}

    @application.get("/api/v1/categories/{category_id}")
    def get_catalog_category(category_id: str):
        """One catalog category."""
        return get_category(category_id).to_dict()

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def _validate(plan: AllocationPlan):
        return validate_priority_count(
            plan.tier_by_category_id,
            plan.enabled_category_ids,
            min_top=config.priorities.min_top,
            max_top=config.priorities.max_top,
        )

    @application.post("/api/v1/priorities/validate")
    def validate_priorities(plan: AllocationPlan):
        """Check the TOP priority count of a plan."""
        return _validate(plan).to_dict()

    @application.post("/api/v1/allocations")
    def generate_allocations(
        plan: AllocationPlan,
        enforce_priorities: bool | None = Query(default=None),
    ):
        """Allocate a plan's budget across its enabled categories."""
        validation = _validate(plan)
        enforce = config.priorities.enforce if enforce_priorities is None else enforce_priorities
        if enforce and not validation.is_valid:
            raise HTTPException(422, validation.message)

        result = calculate_allocations(plan_to_input(plan, config))
        logger.info(
            f"Allocated {plan.total_budget_cents} cents across "
            f"{len(result.allocations_by_category_id)} categories"
        )

        return {
            "allocations": result.allocations_by_category_id,
            "total_budget_cents": result.total_budget_cents,
            "total_allocated_cents": result.total_allocated_cents,
            "group_totals": group_totals(result),
            "priority_validation": validation.to_dict(),
            "diagnostics": result.diagnostics.to_dict(),
        }

    @application.post("/api/v1/scenarios")
    def generate_scenarios(
        plan: AllocationPlan,
        multipliers: str | None = Query(default=None, description="e.g. 0.9,1.0,1.1"),
    ):
        """Allocations at several budget levels."""
        mults = _parse_multipliers(multipliers, config.allocation.scenario_multipliers)
        scenarios = create_budget_scenarios(plan_to_input(plan, config), mults)
        table = compare_scenarios(scenarios)
        return {
            "scenarios": [s.to_dict() for s in scenarios],
            "comparison": json.loads(table.to_json(orient="records")),
        }

    return application


def run_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Start the API server."""
    import uvicorn

    logger.info(f"Starting wedding-budget API on {host}:{port}")
    uvicorn.run("wedding_budget.api.app:create_app", host=host, port=port, reload=reload, factory=True)
