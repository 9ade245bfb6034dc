"""
Best-fit selection of items under a byte capacity.

Picks the subset of items whose total size comes as close as possible to
the capacity without exceeding it. An exact 0/1 knapsack over byte counts
is too large for gigabyte capacities, so the problem is solved in three
stages:

    1. scale_and_solve - divide sizes and capacity by a divisor, then run
       an exact dynamic program in the scaled space.
    2. repair - rounding can push the true total over the capacity; drop
       items with the lowest size per scaled unit until it fits again.
    3. backfill - first-fit any leftover items into the remaining space.

A larger divisor means a smaller DP table but coarser rounding, so more
work for the repair stage.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np

from folderfit.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalingPolicy:
    """
    Divisor tiers used to shrink the DP table.

    Attributes:
        tiers: ``(max_capacity, divisor)`` pairs, kept sorted by bound.
            The first tier whose bound is >= the capacity wins.
        fallback: Divisor for capacities above every tier.
    """

    tiers: tuple[tuple[int, int], ...] = (
        (100_000, 1),
        (1_000_000, 100),
        (1_000_000_000, 1_000),
    )
    fallback: int = 1_000_000

    def __post_init__(self) -> None:
        if self.fallback < 1 or any(divisor < 1 for _, divisor in self.tiers):
            raise InvalidInputError("Scaling divisors must be >= 1")
        object.__setattr__(self, "tiers", tuple(sorted(self.tiers)))

    def divisor_for(self, capacity: int) -> int:
        for bound, divisor in self.tiers:
            if capacity <= bound:
                return divisor
        return self.fallback


DEFAULT_SCALING = ScalingPolicy()


def total_size(items: Mapping[str, int]) -> int:
    """Sum of all sizes in a mapping."""
    return sum(items.values())


def choose_divisor(capacity: int, policy: ScalingPolicy = DEFAULT_SCALING) -> int:
    """Return the scaling divisor for a capacity."""
    return policy.divisor_for(capacity)


def scale_size(size: int, divisor: int) -> int:
    """
    Scale a size down by the divisor.

    Positive sizes never scale to zero when the divisor is above 1,
    otherwise the DP could take any number of them for free.
    """
    scaled = size // divisor
    if divisor > 1 and size > 0 and scaled == 0:
        return 1
    return scaled


def scale_and_solve(items: Mapping[str, int], capacity: int, divisor: int) -> dict[str, int]:
    """
    Solve the knapsack exactly on scaled sizes.

    Args:
        items: Name to true size, in processing order.
        capacity: True capacity in bytes.
        divisor: Scaling divisor (1 solves the unscaled problem).

    Returns:
        Selected items with their true sizes. The true total may exceed
        the capacity when divisor > 1.
    """
    names = list(items)
    scaled_sizes = [scale_size(items[name], divisor) for name in names]
    scaled_capacity = capacity // divisor
    n = len(names)

    logger.debug(
        "Knapsack table: %d items x %d scaled capacity (divisor %d)",
        n,
        scaled_capacity,
        divisor,
    )

    best = np.zeros(scaled_capacity + 1, dtype=np.int64)
    keep = np.zeros((n + 1, scaled_capacity + 1), dtype=bool)

    for i, weight in enumerate(scaled_sizes, start=1):
        if weight == 0 or weight > scaled_capacity:
            continue
        taken = best[: scaled_capacity + 1 - weight] + weight
        improved = taken > best[weight:]
        keep[i, weight:] = improved
        best[weight:] = np.where(improved, taken, best[weight:])

    selected: dict[str, int] = {}
    j = scaled_capacity
    for i in range(n, 0, -1):
        if j <= 0:
            break
        if keep[i, j]:
            name = names[i - 1]
            selected[name] = items[name]
            j -= scaled_sizes[i - 1]

    return selected


def repair(selection: Mapping[str, int], capacity: int, divisor: int) -> dict[str, int]:
    """
    Remove items until the true total fits the capacity.

    The item removed first is the one with the lowest ratio of true size
    to scaled size, i.e. the one that rounding favoured the most. Ties go
    to the first name in sorted order.

    Returns:
        The repaired selection, empty if every item had to go.
    """
    repaired = dict(selection)
    while total_size(repaired) > capacity:
        if not repaired:
            return {}
        victim = min(
            sorted(repaired),
            key=lambda name: repaired[name] / max(1, repaired[name] // divisor),
        )
        logger.debug("Repair: dropping %s (%d bytes)", victim, repaired[victim])
        del repaired[victim]
    return repaired


def backfill(selection: Mapping[str, int], items: Mapping[str, int], capacity: int) -> dict[str, int]:
    """
    Greedily add unselected items that still fit.

    Scans ``items`` in order and takes every item no larger than the
    remaining space (first fit). Stops after a scan adds nothing.
    """
    filled = dict(selection)
    remaining = capacity - total_size(filled)
    added = True
    while added:
        added = False
        for name, size in items.items():
            if name not in filled and size <= remaining:
                filled[name] = size
                remaining -= size
                added = True
                logger.debug("Backfill: adding %s (%d bytes)", name, size)
    return filled


class Selector:
    """
    Chooses the subset of items that best fills a capacity.

    Holds no state between calls; one instance can be reused freely.
    """

    def __init__(self, policy: Optional[ScalingPolicy] = None):
        """
        Initialize the selector.

        Args:
            policy: Divisor tiers, defaults to DEFAULT_SCALING.
        """
        self.policy = policy or DEFAULT_SCALING

    def select(self, items: Mapping[str, int], capacity: int) -> dict[str, int]:
        """
        Select the items that best fill the capacity.

        Items are processed sorted by name, so the result does not depend
        on the order of the input mapping.

        Args:
            items: Name to size in bytes.
            capacity: Target capacity in bytes.

        Returns:
            Selected name to size mapping, sorted by name. Its total never
            exceeds the capacity. An empty result for a non-empty input
            means no subset fits.

        Raises:
            InvalidInputError: If the capacity or any size is negative.
        """
        if capacity < 0:
            raise InvalidInputError(f"Capacity must be >= 0, got {capacity}")
        for name, size in items.items():
            if size < 0:
                raise InvalidInputError(f"Size of {name!r} must be >= 0, got {size}")

        ordered = {name: items[name] for name in sorted(items)}

        if total_size(ordered) <= capacity:
            logger.debug("All %d items fit, no optimisation needed", len(ordered))
            return ordered

        divisor = choose_divisor(capacity, self.policy)
        selection = scale_and_solve(ordered, capacity, divisor)
        selection = repair(selection, capacity, divisor)
        selection = backfill(selection, ordered, capacity)

        return {name: size for name, size in ordered.items() if name in selection}


def select(
    items: Mapping[str, int],
    capacity: int,
    policy: Optional[ScalingPolicy] = None,
) -> dict[str, int]:
    """Select the best-fitting items using a one-off Selector."""
    return Selector(policy).select(items, capacity)
