from __future__ import annotations

from typing import Dict, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import MalformedMachineError
from .machine import MAX_BUTTONS, MAX_LIGHTS, bit_test, parity_mask


class Pattern(NamedTuple):
    """Net effect of pressing a subset of buttons once each."""

    hit_counts: Tuple[int, ...]
    parity: int
    cost: int
    combination: int


PatternCatalog = Dict[int, Dict[Tuple[int, ...], Pattern]]

# Combinations enumerated per numpy block, bounding memory to tens of MB.
CHUNK_SIZE = 1 << 16


def _combination_bits(start: int, stop: int, n_buttons: int) -> np.ndarray:
    """Row k is the little-endian bit vector of combination start + k."""
    combos = np.arange(start, stop, dtype=np.int64)
    return (combos[:, None] >> np.arange(n_buttons, dtype=np.int64)) & 1


def build_catalog(n: int, buttons: Sequence[int]) -> PatternCatalog:
    """Group every button subset by the parity of its hit-count vector.

    For each (parity, hit_counts) pair only the cheapest subset is kept, so
    later steps can subtract an exact hit-count vector at minimum cost.
    Subsets are enumerated in blocks of CHUNK_SIZE, so memory stays small,
    but time still grows as 2^B; B beyond about 24 is impractical.
    """
    if not 1 <= n <= MAX_LIGHTS:
        raise MalformedMachineError(
            f"Light count must be in [1, {MAX_LIGHTS}], got {n}"
        )
    if len(buttons) > MAX_BUTTONS:
        raise MalformedMachineError(
            f"Button count must be at most {MAX_BUTTONS}, got {len(buttons)}"
        )
    for j, button in enumerate(buttons):
        if button < 0 or button >> n:
            raise MalformedMachineError(
                f"Button {j} mask {button:#b} is wider than {n} lights"
            )

    effect = np.zeros((n, len(buttons)), dtype=np.int64)
    for j, button in enumerate(buttons):
        for i in range(n):
            if bit_test(button, i):
                effect[i, j] = 1

    catalog: PatternCatalog = {}
    total = 1 << len(buttons)
    for start in range(0, total, CHUNK_SIZE):
        bits = _combination_bits(start, min(start + CHUNK_SIZE, total), len(buttons))
        hits = bits @ effect.T  # shape (chunk, n)
        costs = bits.sum(axis=1)
        for k in range(len(bits)):
            hit_counts = tuple(int(h) for h in hits[k])
            parity = parity_mask(hit_counts)
            cost = int(costs[k])
            bucket = catalog.setdefault(parity, {})
            current = bucket.get(hit_counts)
            if current is None or cost < current.cost:
                bucket[hit_counts] = Pattern(hit_counts, parity, cost, start + k)
    return catalog


def catalog_size(catalog: PatternCatalog) -> int:
    return sum(len(bucket) for bucket in catalog.values())


def catalog_width(catalog: PatternCatalog) -> Optional[int]:
    """Light count the catalog was built for, or None if it is empty."""
    for bucket in catalog.values():
        for hit_counts in bucket:
            return len(hit_counts)
    return None
