from __future__ import annotations

from typing import Optional

from ..echelon import (
    Matrix,
    build_joltage_matrix,
    classify_pivots,
    quick_solve,
    reduce_to_echelon,
)
from ..machine import Machine
from .base import Solver


class EchelonJoltage(Solver):
    """Integer row-echelon reduction; returns None when free columns remain
    and no shortcut applies."""

    name = "echelon"
    question = "joltage"

    def __init__(self):
        self.reduced: Optional[Matrix] = None
        self.pivots: Optional[list] = None

    def solve(self, machine: Machine) -> Optional[int]:
        original = build_joltage_matrix(machine)
        self.reduced = reduce_to_echelon(original)
        self.pivots = classify_pivots(self.reduced, machine.n_buttons)
        return quick_solve(original, self.reduced, self.pivots)
