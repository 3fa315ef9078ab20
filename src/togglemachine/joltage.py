from __future__ import annotations

import sys
from typing import Dict, Optional, Sequence, Tuple

from .catalog import PatternCatalog, build_catalog, catalog_width
from .errors import MalformedMachineError
from .machine import Machine, bit_test, parity_mask

# Larger than any real press count; never multiplied or added to.
UNREACHABLE = sys.maxsize

JoltageState = Tuple[int, ...]


def _reduce(joltages: JoltageState, hit_counts: JoltageState) -> JoltageState | None:
    """Subtract a pattern and halve, or None if the pattern overshoots."""
    if any(j < h for j, h in zip(joltages, hit_counts)):
        return None
    return tuple((j - h) // 2 for j, h in zip(joltages, hit_counts))


def _min_cost(
    state: JoltageState,
    catalog: PatternCatalog,
    memo: Dict[JoltageState, int],
) -> int:
    if not any(state):
        return 0
    if state in memo:
        return memo[state]

    best = UNREACHABLE
    bucket = catalog.get(parity_mask(state))
    if bucket is not None:
        for hit_counts, pattern in bucket.items():
            remainder = _reduce(state, hit_counts)
            if remainder is None:
                continue
            sub = _min_cost(remainder, catalog, memo)
            if sub == UNREACHABLE:
                continue
            best = min(best, pattern.cost + 2 * sub)

    memo[state] = best
    return best


def min_joltage_cost(
    joltages: Sequence[int],
    catalog: PatternCatalog,
    memo: Optional[Dict[JoltageState, int]] = None,
) -> int:
    """Fewest presses that account for ``joltages`` exactly.

    Any press vector x splits as x = p + 2y with p in {0, 1}^B, so the
    joltages minus the hit counts of p must be even and y solves the halved
    remainder. Returns UNREACHABLE when no decomposition exists.

    Raises MalformedMachineError if ``joltages`` and the catalog disagree on
    the number of lights.
    """
    state = tuple(joltages)
    width = catalog_width(catalog)
    if width is not None and len(state) != width:
        raise MalformedMachineError(
            f"Expected {width} joltages for this catalog, got {len(state)}"
        )
    if any(j < 0 for j in state):
        raise MalformedMachineError(
            f"Joltages must be non-negative, got {state}"
        )
    if memo is None:
        memo = {}
    return _min_cost(state, catalog, memo)


def joltage_press_counts(
    machine: Machine,
    catalog: Optional[PatternCatalog] = None,
    memo: Optional[Dict[JoltageState, int]] = None,
) -> Tuple[int, ...] | None:
    """Per-button press counts of one optimal solution, or None if unreachable."""
    if catalog is None:
        catalog = build_catalog(machine.n, machine.buttons)
    if memo is None:
        memo = {}

    state = machine.joltages
    total = min_joltage_cost(state, catalog, memo)
    if total == UNREACHABLE:
        return None

    counts = [0] * machine.n_buttons
    weight = 1
    while any(state):
        target = _min_cost(state, catalog, memo)
        chosen = None
        for hit_counts, pattern in catalog[parity_mask(state)].items():
            remainder = _reduce(state, hit_counts)
            if remainder is None:
                continue
            sub = _min_cost(remainder, catalog, memo)
            if sub != UNREACHABLE and pattern.cost + 2 * sub == target:
                chosen = (pattern, remainder)
                break
        assert chosen is not None, "memoized optimum has no matching pattern"
        pattern, state = chosen
        for j in range(machine.n_buttons):
            if bit_test(pattern.combination, j):
                counts[j] += weight
        weight *= 2
    return tuple(counts)


def solve_joltage(machine: Machine) -> int:
    """Minimum joltage presses for one machine, or UNREACHABLE."""
    catalog = build_catalog(machine.n, machine.buttons)
    return min_joltage_cost(machine.joltages, catalog, {})
