from __future__ import annotations

from typing import Dict, Optional

from ..catalog import PatternCatalog, build_catalog, catalog_size
from ..joltage import JoltageState, min_joltage_cost
from ..machine import Machine
from .base import Solver


class HalvingJoltage(Solver):
    """Strip a press pattern, halve the remainder and recurse.

    The catalog and memo table belong to the machine being solved and are
    rebuilt for every call.
    """

    name = "halving"
    question = "joltage"

    def __init__(self):
        self.catalog: Optional[PatternCatalog] = None
        self.memo: Dict[JoltageState, int] = {}

    def solve(self, machine: Machine) -> int:
        self.catalog = build_catalog(machine.n, machine.buttons)
        self.memo = {}
        return min_joltage_cost(machine.joltages, self.catalog, self.memo)

    def stats(self) -> dict:
        return {
            "patterns": catalog_size(self.catalog) if self.catalog else 0,
            "states": len(self.memo),
        }
