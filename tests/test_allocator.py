"""Tests for the budget allocation engine."""

import json

import pytest

from wedding_budget.allocation import (
    AllocationInput,
    allocate_budget,
    calculate_allocations,
)
from wedding_budget.allocation.allocator import (
    compute_shares,
    distribute_remainder,
    floor_allocations,
    rank_remainders,
)
from wedding_budget.core.contracts import Tier, TierMultipliers


def _five_category_input(total=1_000_000):
    return AllocationInput(
        total_budget_cents=total,
        enabled_category_ids=("cat1", "cat2", "cat3", "cat4", "cat5"),
        base_weights={"cat1": 0.3, "cat2": 0.25, "cat3": 0.2, "cat4": 0.15, "cat5": 0.1},
        tier_by_category_id={
            "cat1": "TOP",
            "cat2": "IMPORTANT",
            "cat3": "IMPORTANT",
            "cat4": "NICE",
            "cat5": "NICE",
        },
    )


class TestCalculateAllocations:
    """Test the full allocation pipeline."""

    def test_concrete_three_category_budget(self):
        """Test the 30,000.00 budget split across TOP/IMPORTANT/NICE."""
        result = allocate_budget(
            total_budget_cents=3_000_000,
            enabled_category_ids=["cat1", "cat2", "cat3"],
            base_weights={"cat1": 0.25, "cat2": 0.20, "cat3": 0.15},
            tier_by_category_id={"cat1": "TOP", "cat2": "IMPORTANT", "cat3": "NICE"},
        )

        diag = result.diagnostics
        assert diag.effective_weights_by_category_id["cat1"] == pytest.approx(0.35)
        assert diag.effective_weights_by_category_id["cat2"] == pytest.approx(0.20)
        assert diag.effective_weights_by_category_id["cat3"] == pytest.approx(0.105)
        assert diag.sum_effective_weights == pytest.approx(0.655)
        assert diag.shares_by_category_id["cat1"] == pytest.approx(0.5344, abs=1e-4)

        # Floors sum to 2,999,999; the leftover cent goes to the largest remainder
        assert [r.category_id for r in diag.rounding_remainders] == ["cat2", "cat1", "cat3"]
        assert result.allocations_by_category_id == {
            "cat1": 1_603_053,
            "cat2": 916_031,
            "cat3": 480_916,
        }
        assert result.total_allocated_cents == 3_000_000

    def test_sum_equals_total(self):
        """Test that allocations always reconstruct the budget exactly."""
        for total in [0, 1, 2, 7, 99, 101, 12_345, 1_000_000, 3_333_333, 987_654_321]:
            result = calculate_allocations(_five_category_input(total))
            assert sum(result.allocations_by_category_id.values()) == total

    def test_no_negative_allocations(self):
        """Test every allocation is at least zero."""
        result = calculate_allocations(_five_category_input())

        assert all(cents >= 0 for cents in result.allocations_by_category_id.values())
        assert all(isinstance(cents, int) for cents in result.allocations_by_category_id.values())

    def test_removing_category_redistributes(self):
        """Test disabling a category never shrinks the others."""
        base = _five_category_input()
        before = calculate_allocations(base).allocations_by_category_id
        after = calculate_allocations(
            base.with_enabled(["cat2", "cat3", "cat4", "cat5"])
        ).allocations_by_category_id

        assert "cat1" not in after
        assert sum(after.values()) == base.total_budget_cents
        for category_id, cents in after.items():
            assert cents >= before[category_id]
        assert any(cents > before[cid] for cid, cents in after.items())

    def test_equal_weights_redistribution(self):
        """Test three equal categories become two halves."""
        base = AllocationInput(
            total_budget_cents=5_000_000,
            enabled_category_ids=("cat1", "cat2", "cat3"),
            base_weights={"cat1": 0.3, "cat2": 0.3, "cat3": 0.3},
        )

        all_three = calculate_allocations(base).allocations_by_category_id
        two = calculate_allocations(base.with_enabled(["cat2", "cat3"])).allocations_by_category_id

        assert all_three == {"cat1": 1_666_667, "cat2": 1_666_667, "cat3": 1_666_666}
        assert two == {"cat2": 2_500_000, "cat3": 2_500_000}

    def test_tier_ordering(self):
        """Test TOP > IMPORTANT > NICE with equal base weights."""
        result = allocate_budget(
            total_budget_cents=1_000_000,
            enabled_category_ids=["venue", "music", "favors"],
            base_weights={"venue": 0.3, "music": 0.3, "favors": 0.3},
            tier_by_category_id={"venue": Tier.TOP, "music": Tier.IMPORTANT, "favors": Tier.NICE},
        )

        alloc = result.allocations_by_category_id
        assert alloc["venue"] > alloc["music"] > alloc["favors"]

    def test_deterministic(self):
        """Test identical inputs give identical output, diagnostics included."""
        first = calculate_allocations(_five_category_input(1_234_567))
        second = calculate_allocations(_five_category_input(1_234_567))

        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_empty_enabled_set(self):
        """Test no categories gives an empty, well-formed result."""
        result = allocate_budget(total_budget_cents=500_000, enabled_category_ids=[])

        assert result.allocations_by_category_id == {}
        assert result.diagnostics.sum_effective_weights == 0
        assert result.diagnostics.effective_weights_by_category_id == {}
        assert result.diagnostics.shares_by_category_id == {}
        assert result.diagnostics.rounding_remainders == []
        assert result.total_budget_cents == 500_000

    def test_zero_budget(self):
        """Test a zero budget allocates zero everywhere."""
        result = calculate_allocations(_five_category_input(0))

        assert set(result.allocations_by_category_id.values()) == {0}
        assert result.diagnostics.rounding_remainders == []

    def test_single_category_gets_everything(self):
        """Test one category receives the whole budget."""
        result = allocate_budget(1_456_789, ["venue"], {"venue": 0.2}, {"venue": "NICE"})

        assert result.allocations_by_category_id == {"venue": 1_456_789}

    def test_missing_weights_and_tiers_default(self):
        """Test sparse lookups fall back to 0.3 and IMPORTANT."""
        result = allocate_budget(1000, ["custom", "venue"], {"venue": 0.3}, {"custom": "BOGUS"})

        weights = result.diagnostics.effective_weights_by_category_id
        assert weights["custom"] == pytest.approx(0.3)
        assert weights["venue"] == pytest.approx(0.3)
        assert result.allocations_by_category_id == {"custom": 500, "venue": 500}

    def test_tie_break_follows_supplied_order(self):
        """Test equal remainders are resolved by enabled-list order."""
        result = allocate_budget(1, ["b", "a"], {"a": 0.2, "b": 0.2})
        assert result.allocations_by_category_id == {"b": 1, "a": 0}

        result = allocate_budget(1, ["a", "b"], {"a": 0.2, "b": 0.2})
        assert result.allocations_by_category_id == {"a": 1, "b": 0}

    def test_duplicate_ids_collapsed(self):
        """Test a repeated id is weighted once."""
        dup = allocate_budget(10_000, ["a", "a", "b"], {"a": 0.5, "b": 0.5})
        plain = allocate_budget(10_000, ["a", "b"], {"a": 0.5, "b": 0.5})

        assert dup.to_dict() == plain.to_dict()

    def test_multiplier_override(self):
        """Test a whole-table multiplier override."""
        result = allocate_budget(
            900,
            ["a", "b"],
            {"a": 0.5, "b": 0.5},
            {"a": "TOP", "b": "NICE"},
            tier_multipliers={"TOP": 2.0, "IMPORTANT": 1.0, "NICE": 1.0},
        )

        assert result.allocations_by_category_id == {"a": 600, "b": 300}

    def test_zero_weights_fall_back_to_equal_split(self):
        """Test all-zero multipliers split the budget evenly."""
        result = allocate_budget(
            100,
            ["a", "b", "c"],
            {"a": 0.5, "b": 0.2, "c": 0.1},
            tier_multipliers=TierMultipliers(top=0, important=0, nice=0),
        )

        assert result.diagnostics.equal_split_fallback is True
        assert result.allocations_by_category_id == {"a": 34, "b": 33, "c": 33}

    def test_result_frame_and_save(self, tmp_path):
        """Test tabular export and JSON/CSV persistence."""
        result = calculate_allocations(_five_category_input())

        df = result.to_frame()
        assert list(df.columns) == ["category_id", "effective_weight", "share", "remainder", "allocated_cents"]
        assert len(df) == 5
        assert df["allocated_cents"].sum() == 1_000_000

        out = tmp_path / "out" / "allocation.json"
        result.save(out)

        saved = json.loads(out.read_text())
        assert saved["total_allocated_cents"] == 1_000_000
        assert out.with_suffix(".csv").exists()


class TestStages:
    """Test the individual pipeline stages."""

    def test_compute_shares(self):
        """Test shares are weight over total."""
        shares, fallback = compute_shares({"a": 1.0, "b": 3.0}, 4.0)

        assert shares == {"a": 0.25, "b": 0.75}
        assert fallback is False

    def test_compute_shares_empty(self):
        assert compute_shares({}, 0.0) == ({}, False)

    def test_floor_allocations(self):
        """Test flooring never exceeds the proportional share."""
        floors, remainders = floor_allocations({"a": 0.25, "b": 0.75}, 10)

        assert floors == {"a": 2, "b": 7}
        assert remainders["a"] == pytest.approx(0.5)
        assert remainders["b"] == pytest.approx(0.5)
        assert 10 - sum(floors.values()) < len(floors)

    def test_rank_remainders(self):
        """Test ranking is descending, stable, and drops zeros."""
        ranked = rank_remainders({"a": 0.2, "b": 0.7, "c": 0.0, "d": 0.2})

        assert [r.category_id for r in ranked] == ["b", "a", "d"]

    def test_distribute_remainder(self):
        """Test one cent per category, largest remainder first."""
        allocations, ranked = distribute_remainder(
            {"a": 10, "b": 10, "c": 10},
            {"a": 0.4, "b": 0.9, "c": 0.7},
            32,
        )

        assert allocations == {"a": 10, "b": 11, "c": 11}
        assert [r.category_id for r in ranked] == ["b", "c", "a"]

    def test_distribute_remainder_takes_back_overshoot(self):
        """Test floors above the total are trimmed from the smallest remainder."""
        allocations, _ = distribute_remainder({"a": 5, "b": 6}, {"a": 0.1, "b": 0.0}, 10)

        assert allocations == {"a": 5, "b": 5}

    def test_distribute_remainder_cycles_leftover(self):
        """Test cents beyond the remainder list keep cycling."""
        allocations, _ = distribute_remainder({"a": 0, "b": 0}, {"a": 0.5, "b": 0.0}, 3)

        assert allocations == {"a": 3, "b": 0}
