from __future__ import annotations

from ..machine import Machine
from ..toggle import min_toggle_cost
from .base import Solver


class ExhaustiveToggle(Solver):
    """Try every subset of buttons and keep the smallest matching one."""

    name = "exhaustive"
    question = "lights"

    def solve(self, machine: Machine) -> int:
        return min_toggle_cost(machine)
