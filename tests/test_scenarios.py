"""Tests for scenario planning and grouped summaries."""

import pytest

from wedding_budget.allocation import (
    AllocationInput,
    calculate_allocations,
    compare_scenarios,
    create_budget_scenarios,
    create_tier_shift_scenarios,
    parse_budget_multipliers,
)
from wedding_budget.allocation.scenarios import compute_budget_frontier
from wedding_budget.allocation.summary import group_totals, summarize_allocations
from wedding_budget.catalog import Category
from wedding_budget.core.contracts import CategoryGroup


@pytest.fixture
def base_input():
    return AllocationInput(
        total_budget_cents=2_000_000,
        enabled_category_ids=("cat_001", "cat_002", "cat_004", "cat_026"),
        base_weights={"cat_001": 0.20, "cat_002": 0.18, "cat_004": 0.12, "cat_026": 0.10},
        tier_by_category_id={"cat_001": "TOP", "cat_004": "NICE"},
    )


class TestBudgetScenarios:
    """Test scenarios at different budget levels."""

    def test_default_multipliers(self, base_input):
        scenarios = create_budget_scenarios(base_input)

        assert [s.total_budget_cents for s in scenarios] == [
            1_600_000, 1_800_000, 2_000_000, 2_200_000, 2_400_000,
        ]
        for s in scenarios:
            assert sum(s.allocation.values()) == s.total_budget_cents

    def test_custom_multipliers(self, base_input):
        scenarios = create_budget_scenarios(base_input, [0.5, 1.0])

        assert len(scenarios) == 2
        assert scenarios[0].name == "Budget (50%)"
        assert scenarios[1].allocation == calculate_allocations(base_input).allocations_by_category_id

    @pytest.mark.parametrize("mult", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_multiplier_rejected(self, base_input, mult):
        with pytest.raises(ValueError, match="finite"):
            create_budget_scenarios(base_input, [1.0, mult])

    def test_larger_budget_never_shrinks_category(self, base_input):
        small, large = create_budget_scenarios(base_input, [1.0, 1.5])

        for category_id, cents in small.allocation.items():
            assert large.allocation[category_id] >= cents


class TestParseBudgetMultipliers:
    """Test comma-separated multiplier parsing."""

    def test_parse(self):
        assert parse_budget_multipliers("0.9, 1.0,1.1,") == [0.9, 1.0, 1.1]

    @pytest.mark.parametrize("raw", ["nan", "1.0,inf", "-Infinity", "1e400", "lots"])
    def test_rejected(self, raw):
        with pytest.raises(ValueError):
            parse_budget_multipliers(raw)


class TestTierShiftScenarios:
    """Test moving one category through every tier."""

    def test_tier_shift(self, base_input):
        scenarios = create_tier_shift_scenarios(base_input, "cat_002")

        assert [s.name for s in scenarios] == [
            "Current", "cat_002 TOP", "cat_002 IMPORTANT", "cat_002 NICE",
        ]
        top, important, nice = (s.allocation["cat_002"] for s in scenarios[1:])
        assert top > important > nice
        # cat_002 has no tier in the base input, so IMPORTANT matches current
        assert scenarios[0].allocation == scenarios[2].allocation

    def test_base_input_untouched(self, base_input):
        create_tier_shift_scenarios(base_input, "cat_002")

        assert "cat_002" not in base_input.tier_by_category_id


class TestCompareScenarios:
    """Test comparison tables."""

    def test_comparison_table(self, base_input):
        df = compare_scenarios(create_budget_scenarios(base_input, [1.0, 1.1]))

        assert list(df["scenario"]) == ["Budget (100%)", "Budget (110%)"]
        assert "cat_001_cents" in df.columns
        assert list(df["budget_change_vs_base_cents"]) == [0, 200_000]
        assert df["cat_001_change_cents"].iloc[0] == 0
        assert df["cat_001_change_cents"].iloc[1] > 0

    def test_tier_shift_changes_per_category(self, base_input):
        """Test a tier shift moves cents between categories at a fixed total."""
        df = compare_scenarios(create_tier_shift_scenarios(base_input, "cat_002"))
        change_cols = [c for c in df.columns if c.endswith("_change_cents")]

        assert list(df["budget_change_vs_base_cents"]) == [0, 0, 0, 0]
        assert list(df["cat_002_change_cents"] > 0) == [False, True, False, False]
        assert df["cat_002_change_cents"].iloc[3] < 0
        assert (df.loc[2, change_cols] == 0).all()
        assert (df[change_cols].sum(axis=1) == 0).all()

    def test_empty(self):
        assert compare_scenarios([]).empty


class TestBudgetFrontier:

    def test_frontier(self, base_input):
        df = compute_budget_frontier(base_input, (1_000_000, 2_000_000), n_points=3)

        assert list(df["budget_cents"]) == [1_000_000, 1_500_000, 2_000_000]
        cents_cols = [c for c in df.columns if c.endswith("_cents") and c != "budget_cents"]
        assert (df[cents_cols].sum(axis=1) == df["budget_cents"]).all()


class TestSummary:
    """Test grouped allocation summaries."""

    def test_summarize_against_catalog(self, base_input):
        result = calculate_allocations(base_input)
        df = summarize_allocations(result)

        assert list(df["category_id"]) == ["cat_001", "cat_002", "cat_004", "cat_026"]
        assert df.loc[df["category_id"] == "cat_001", "name"].item() == "Venue & Rentals"
        assert df["share_of_budget"].sum() == pytest.approx(1.0)

    def test_group_totals(self, base_input):
        result = calculate_allocations(base_input)
        totals = group_totals(result)

        assert list(totals) == ["CORE", "SAFETY_NET"]
        assert sum(totals.values()) == base_input.total_budget_cents

    def test_custom_categories(self):
        result = calculate_allocations(AllocationInput(1000, ("photo_booth", "cat_001")))
        totals = group_totals(result)

        assert set(totals) == {"CUSTOM", "CORE"}

    def test_explicit_category_list(self):
        cats = [Category("x", "Extra", CategoryGroup.FLEX, 0.1)]
        result = calculate_allocations(AllocationInput(500, ("x",)))
        df = summarize_allocations(result, cats)

        assert df.loc[0, "group"] == "FLEX"
        assert df.loc[0, "allocated_cents"] == 500

    def test_empty_result(self):
        result = calculate_allocations(AllocationInput(1000, ()))

        assert summarize_allocations(result).empty
        assert group_totals(result) == {}
