from __future__ import annotations

from typing import Optional

from ..machine import Machine
from ..toggle import breadth_first_presses
from .base import Solver


class BreadthFirstToggle(Solver):
    """Breadth-first search over light states; keeps the last plan found."""

    name = "breadth_first"
    question = "lights"

    def __init__(self):
        self.plan: Optional[list[int]] = None

    def solve(self, machine: Machine) -> int:
        self.plan = breadth_first_presses(machine)
        return len(self.plan)
