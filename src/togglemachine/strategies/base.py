from __future__ import annotations

from typing import Optional, Protocol

from ..machine import Machine


class NoSolutionError(Exception):
    """Raised by a solver when its system has no solution for the machine."""

    pass


class Solver(Protocol):
    name: str
    question: str  # "lights" or "joltage"

    def solve(self, machine: Machine) -> Optional[int]: ...
