from __future__ import annotations

from togglemachine.strategies.base import NoSolutionError, Solver
from togglemachine.strategies.breadth_first_toggle import BreadthFirstToggle
from togglemachine.strategies.echelon_joltage import EchelonJoltage
from togglemachine.strategies.exhaustive_toggle import ExhaustiveToggle
from togglemachine.strategies.halving_joltage import HalvingJoltage
from togglemachine.strategies.linear_algebra_minweight import (
    LinearAlgebraMinWeight,
)

SOLVERS = {
    cls.name: cls
    for cls in (
        ExhaustiveToggle,
        BreadthFirstToggle,
        LinearAlgebraMinWeight,
        HalvingJoltage,
        EchelonJoltage,
    )
}


def make_solver(name: str, question: str | None = None) -> Solver:
    cls = SOLVERS.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown solver: {name}")
    if question is not None and cls.question != question:
        raise ValueError(
            f"Solver {name!r} answers {cls.question!r}, not {question!r}"
        )
    return cls()
