from __future__ import annotations

from typing import Optional

from ..algebra import build_effect_matrix, gf2_min_weight_solution
from ..machine import Machine
from .base import NoSolutionError, Solver


class LinearAlgebraMinWeight(Solver):
    """Solve the light pattern over GF(2) for a minimum-weight press set."""

    name = "linear_algebra_minweight"
    question = "lights"

    def __init__(self):
        self.plan: Optional[list[int]] = None

    def solve(self, machine: Machine) -> int:
        system_matrix = build_effect_matrix(machine)
        solution = gf2_min_weight_solution(system_matrix, machine.lights_vector())
        if solution is None:
            self.plan = None
            raise NoSolutionError(
                f"No GF(2) solution for target {machine.lights:#b}"
            )
        self.plan = [int(j) for j in solution.nonzero()[0]]
        return len(self.plan)
