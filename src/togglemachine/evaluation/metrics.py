from __future__ import annotations

from ..joltage import UNREACHABLE


def _solved(cost) -> bool:
    return cost is not None and cost != UNREACHABLE


def total_presses(costs) -> int:
    # unreachable and unresolved machines are left out of the total
    return sum(int(c) for c in costs if _solved(c))


def count_unreachable(costs) -> int:
    return sum(1 for c in costs if c == UNREACHABLE)


def agreement(primary, secondary) -> tuple[int, int, int]:
    """Compare two solvers machine by machine.

    Returns (agree, disagree, unresolved), where unresolved counts machines
    the secondary solver could not settle (None).
    """
    agree = disagree = unresolved = 0
    for p, s in zip(primary, secondary):
        if s is None:
            unresolved += 1
        elif p == s:
            agree += 1
        else:
            disagree += 1
    return agree, disagree, unresolved
