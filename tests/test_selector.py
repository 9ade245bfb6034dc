"""Tests for the best-fit selector and its stages."""

import pytest

from folderfit.core.errors import InvalidInputError
from folderfit.core.selector import (
    ScalingPolicy,
    Selector,
    backfill,
    choose_divisor,
    repair,
    scale_and_solve,
    scale_size,
    select,
    total_size,
)
from folderfit.core.units import KB, MB


class TestSelect:
    def test_everything_fits_exactly(self):
        items = {"a": 1024, "b": 2048}
        assert select(items, 3072) == {"a": 1024, "b": 2048}

    def test_everything_fits_in_megabytes(self):
        items = {"file1": 1024 * KB, "file2": 2048 * KB}
        assert select(items, 3072 * KB) == items

    def test_exact_fit_excludes_overflowing_item(self):
        items = {"a": 1024, "b": 4048, "c": 2048}
        assert select(items, 5072) == {"a": 1024, "b": 4048}

    def test_empty_input(self):
        assert select({}, 4096) == {}

    def test_huge_capacity_returns_all(self):
        items = {"a": 100, "b": 150, "c": 250}
        selected = select(items, 10_000_000_000)
        assert selected == items
        assert 10_000_000_000 - total_size(selected) == 10_000_000_000 - 500

    def test_nothing_fits(self):
        assert select({"a": 10, "b": 20}, 5) == {}

    def test_zero_capacity(self):
        assert select({"a": 5}, 0) == {}

    def test_zero_size_items_fit_zero_capacity(self):
        assert select({"a": 0}, 0) == {"a": 0}
        assert select({"a": 0, "b": 5}, 0) == {"a": 0}

    def test_result_is_sorted_by_name(self):
        items = {"c": 30, "a": 10, "b": 20, "d": 100}
        assert list(select(items, 60)) == ["a", "b", "c"]

    def test_input_order_does_not_matter(self):
        items = {"x": 300, "y": 500, "z": 200, "w": 700, "v": 100}
        reversed_items = dict(reversed(list(items.items())))
        assert select(items, 1000) == select(reversed_items, 1000)

    def test_input_is_not_modified(self):
        items = {"a": 1024, "b": 4048, "c": 2048}
        select(items, 5072)
        assert items == {"a": 1024, "b": 4048, "c": 2048}

    def test_scaled_selection(self):
        items = {"a": 1_200_000, "b": 799_999, "c": 900_000, "d": 100_000}
        selected = select(items, 2_000_000)
        assert selected == {"a": 1_200_000, "b": 799_999}

    def test_scaled_overshoot_is_repaired(self):
        items = {"x": 1_000_999, "y": 1_000_999}
        selected = select(items, 2_000_000)
        assert selected == {"y": 1_000_999}

    def test_gigabyte_capacity(self):
        items = {f"disc{i}": (i + 1) * 300 * MB for i in range(8)}
        capacity = 4_700_000_000
        selected = select(items, capacity)
        assert selected
        assert total_size(selected) <= capacity
        assert capacity - total_size(selected) < 300 * MB

    def test_negative_capacity(self):
        with pytest.raises(InvalidInputError):
            select({"a": 1}, -1)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            select({"a": -1}, 10)

    def test_custom_policy(self):
        policy = ScalingPolicy(tiers=(), fallback=10)
        selector = Selector(policy)
        selected = selector.select({"a": 55, "b": 46, "c": 30}, 100)
        # a+b is the scaled optimum but overshoots by one byte, so a is
        # dropped and c is backfilled.
        assert selected == {"b": 46, "c": 30}

    def test_selector_is_reusable(self):
        selector = Selector()
        first = selector.select({"a": 1024, "b": 4048, "c": 2048}, 5072)
        second = selector.select({"a": 1024, "b": 4048, "c": 2048}, 5072)
        assert first == second


class TestScaling:
    @pytest.mark.parametrize(
        "capacity, divisor",
        [
            (0, 1),
            (100_000, 1),
            (100_001, 100),
            (1_000_000, 100),
            (1_000_001, 1_000),
            (1_000_000_000, 1_000),
            (1_000_000_001, 1_000_000),
            (50_000_000_000, 1_000_000),
        ],
    )
    def test_choose_divisor(self, capacity, divisor):
        assert choose_divisor(capacity) == divisor

    @pytest.mark.parametrize(
        "size, divisor, scaled",
        [
            (5, 1, 5),
            (0, 1, 0),
            (0, 100, 0),
            (50, 100, 1),
            (250, 100, 2),
            (999_999, 1_000_000, 1),
        ],
    )
    def test_scale_size(self, size, divisor, scaled):
        assert scale_size(size, divisor) == scaled

    def test_policy_rejects_zero_divisor(self):
        with pytest.raises(InvalidInputError):
            ScalingPolicy(tiers=((10, 0),))

    def test_policy_sorts_tiers(self):
        policy = ScalingPolicy(tiers=((1_000_000, 100), (100_000, 1)), fallback=1_000)
        assert policy.tiers == ((100_000, 1), (1_000_000, 100))
        assert policy.divisor_for(50_000) == 1
        assert policy.divisor_for(500_000) == 100
        assert policy.divisor_for(5_000_000) == 1_000


class TestStages:
    def test_scale_and_solve_is_exact_unscaled(self):
        items = {"a": 3, "b": 5, "c": 7}
        assert scale_and_solve(items, 10, 1) == {"a": 3, "c": 7}

    def test_scale_and_solve_ignores_oversized_items(self):
        items = {"a": 50, "b": 4}
        assert scale_and_solve(items, 10, 1) == {"b": 4}

    def test_scale_and_solve_can_overshoot(self):
        items = {"x": 1_000_999, "y": 1_000_999}
        selected = scale_and_solve(items, 2_000_000, 1_000)
        assert selected == items
        assert total_size(selected) > 2_000_000

    def test_repair_drops_lowest_ratio(self):
        selection = {"a": 150, "b": 199}
        assert repair(selection, 300, 100) == {"b": 199}

    def test_repair_ties_drop_first_name(self):
        selection = {"y": 1_000_999, "x": 1_000_999}
        assert repair(selection, 2_000_000, 1_000) == {"y": 1_000_999}

    def test_repair_keeps_fitting_selection(self):
        selection = {"a": 10, "b": 20}
        assert repair(selection, 30, 1) == selection

    def test_repair_can_empty_selection(self):
        assert repair({"a": 500}, 100, 100) == {}

    def test_repair_with_nothing_left_to_remove(self):
        assert repair({}, -1, 1) == {}

    def test_backfill_first_fit(self):
        items = {"a": 5, "b": 3, "c": 2, "d": 1}
        assert backfill({"a": 5}, items, 9) == {"a": 5, "b": 3, "d": 1}

    def test_backfill_full_selection_adds_nothing(self):
        items = {"a": 5, "b": 3}
        assert backfill({"a": 5}, items, 5) == {"a": 5}

    def test_backfill_from_empty(self):
        items = {"a": 4, "b": 4, "c": 1}
        assert backfill({}, items, 6) == {"a": 4, "c": 1}
