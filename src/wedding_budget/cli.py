"""
Command-line interface for wedding-budget.

Provides commands for allocating a plan, checking its priorities,
browsing the category catalog, comparing scenarios and serving the API.
"""

from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from wedding_budget.config import configure_logging, get_config, load_config
from wedding_budget.core.contracts import AllocationPlan
from wedding_budget.core.exceptions import WeddingBudgetError

app = typer.Typer(
    name="wedding-budget",
    help="Wedding budget allocation CLI",
    add_completion=False,
)


@app.callback()
def main(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override the configured log level"
    ),
):
    """Wedding budget allocation CLI."""
    try:
        load_config(config_path)
    except WeddingBudgetError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    configure_logging(log_level)


def _load_plan_or_exit(plan_path: Path) -> AllocationPlan:
    from wedding_budget.plans import load_plan

    try:
        return load_plan(plan_path)
    except WeddingBudgetError as e:
        logger.error(f"{e.code}: {e}")
        raise typer.Exit(code=1)


def _format_cents(cents: int) -> str:
    return f"{cents / 100:,.2f}"


@app.command()
def allocate(
    plan_path: Path = typer.Argument(..., help="Plan file (YAML or JSON)"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write results JSON (and CSV) here"
    ),
    skip_priority_check: bool = typer.Option(
        False, "--skip-priority-check", help="Do not check the TOP priority count"
    ),
):
    """Allocate a plan's budget across its enabled categories."""
    from wedding_budget.allocation import calculate_allocations, validate_priority_count
    from wedding_budget.allocation.summary import summarize_allocations
    from wedding_budget.plans import plan_to_input

    config = get_config()
    plan = _load_plan_or_exit(plan_path)

    if not skip_priority_check:
        validation = validate_priority_count(
            plan.tier_by_category_id,
            plan.enabled_category_ids,
            min_top=config.priorities.min_top,
            max_top=config.priorities.max_top,
        )
        if not validation.is_valid:
            if config.priorities.enforce:
                logger.error(validation.message)
                raise typer.Exit(code=1)
            logger.warning(validation.message)

    allocation_input = plan_to_input(plan, config)

    logger.info(
        f"Allocating {_format_cents(plan.total_budget_cents)} across "
        f"{len(allocation_input.enabled_category_ids)} categories"
    )

    result = calculate_allocations(allocation_input)

    summary = summarize_allocations(result)
    if summary.empty:
        typer.echo("No enabled categories.")
    else:
        summary["allocated"] = summary["allocated_cents"].map(_format_cents)
        summary["share"] = summary["share_of_budget"].map(lambda s: f"{s:.1%}")
        typer.echo(summary[["group", "category_id", "name", "allocated", "share"]].to_string(index=False))
        typer.echo(f"Total: {_format_cents(result.total_allocated_cents)}")

    if output is not None:
        result.save(output)
        logger.info(f"Saved allocation to {output}")


@app.command()
def validate_priorities(
    plan_path: Path = typer.Argument(..., help="Plan file (YAML or JSON)"),
):
    """Check the number of TOP priority categories in a plan."""
    from wedding_budget.allocation import validate_priority_count

    config = get_config()
    plan = _load_plan_or_exit(plan_path)

    validation = validate_priority_count(
        plan.tier_by_category_id,
        plan.enabled_category_ids,
        min_top=config.priorities.min_top,
        max_top=config.priorities.max_top,
    )

    typer.echo(validation.message)
    if not validation.is_valid:
        raise typer.Exit(code=1)


@app.command()
def categories(
    group: Optional[str] = typer.Option(
        None, "--group", "-g", help="Only show one group (CORE, ADMIN, ...)"
    ),
):
    """List the master category catalog."""
    from wedding_budget.catalog import list_categories

    try:
        cats = list_categories(group)
    except ValueError:
        logger.error(f"Unknown category group '{group}'")
        raise typer.Exit(code=1)

    for cat in cats:
        typer.echo(f"{cat.id}  {cat.group.value:<13} {cat.base_weight:>5.2f}  {cat.name}")


@app.command()
def scenarios(
    plan_path: Path = typer.Argument(..., help="Plan file (YAML or JSON)"),
    multipliers: Optional[str] = typer.Option(
        None, "--multipliers", "-m", help="Comma-separated budget multipliers, e.g. 0.9,1.0,1.1"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the comparison table as CSV"
    ),
):
    """Compare allocations at several budget levels."""
    from wedding_budget.allocation import (
        compare_scenarios,
        create_budget_scenarios,
        parse_budget_multipliers,
    )
    from wedding_budget.plans import plan_to_input

    config = get_config()
    plan = _load_plan_or_exit(plan_path)

    if multipliers:
        try:
            mults = parse_budget_multipliers(multipliers)
        except ValueError:
            logger.error(f"Invalid multipliers: {multipliers}")
            raise typer.Exit(code=1)
    else:
        mults = config.allocation.scenario_multipliers

    table = compare_scenarios(create_budget_scenarios(plan_to_input(plan, config), mults))
    typer.echo(table.to_string(index=False))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(output, index=False)
        logger.info(f"Saved scenario comparison to {output}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the API server."""
    from wedding_budget.api.app import run_server

    config = get_config()
    run_server(
        host=host or config.server.api_host,
        port=port or config.server.api_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
