from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from togglemachine.echelon import (
    build_joltage_matrix,
    classify_pivots,
    format_equations,
    quick_solve,
    reduce_to_echelon,
    solve_joltage_echelon,
)
from togglemachine.joltage import UNREACHABLE, solve_joltage
from togglemachine.machine import Machine
from togglemachine.strategies import EchelonJoltage

from tests.conftest import random_machine

if TYPE_CHECKING:
    from numpy.random import Generator


def _solve(matrix):
    reduced = reduce_to_echelon(matrix)
    pivots = classify_pivots(reduced, len(matrix[0]) - 1)
    return reduced, pivots, quick_solve(matrix, reduced, pivots)


def test_build_matrix(sample_machines) -> None:
    matrix = build_joltage_matrix(sample_machines[0])
    assert matrix == [
        [0, 0, 0, 0, 1, 1, 3],
        [0, 1, 0, 0, 0, 1, 5],
        [0, 0, 1, 1, 1, 0, 4],
        [1, 1, 0, 1, 0, 0, 7],
    ]


def test_unique_solution() -> None:
    m = Machine.from_wiring([], [[0, 1], [1, 2], [2]], [3, 5, 4])
    original = build_joltage_matrix(m)
    reduced, pivots, result = _solve(original)
    assert reduced == [[1, 0, 0, 3], [0, 1, 0, 2], [0, 0, 1, 2]]
    assert pivots == [0, 1, 2]
    assert result == 7
    assert solve_joltage(m) == 7
    assert original == [[1, 0, 0, 3], [1, 1, 0, 5], [0, 1, 1, 4]]


def test_cross_multiplication_and_gcd() -> None:
    reduced, pivots, result = _solve([[2, 4, 6], [3, 1, 5]])
    assert reduced == [[5, 0, 7], [0, 5, 4]]
    assert pivots == [0, 1]
    assert result == UNREACHABLE


def test_negative_pivot_is_flipped() -> None:
    reduced, pivots, result = _solve([[-2, 4]])
    assert reduced == [[2, -4]]
    assert pivots == [0]
    assert result == UNREACHABLE


def test_trailing_zero_rows_dropped_and_heuristic() -> None:
    reduced, pivots, result = _solve([[1, 1, 2], [2, 2, 4]])
    assert reduced == [[1, 1, 2]]
    assert pivots == [0, None]
    assert result == 2


def test_inconsistent_rows() -> None:
    _, _, result = _solve([[1, 1], [1, 2]])
    assert result == UNREACHABLE
    m = Machine(2, 0b01, [0b01], [4, 2])
    assert solve_joltage_echelon(m) == UNREACHABLE
    assert solve_joltage(m) == UNREACHABLE


def test_needs_further_resolution() -> None:
    m = Machine(1, 0, [0b1, 0b0], [2])
    assert solve_joltage_echelon(m) is None


def test_format_equations() -> None:
    assert format_equations([[5, 0, 7], [0, 5, 4]], [0, 1]) == ["5x1 = 7", "5x2 = 4"]
    assert format_equations([[1, 1, 2]], [0, None]) == ["x1 + x2 = 2", "x2 is free"]
    assert format_equations([[1, -2, 3]], [0, None]) == ["x1 - 2x2 = 3", "x2 is free"]


@pytest.mark.parametrize(("n", "n_buttons"), [(3, 3), (5, 3), (6, 4), (6, 6)])
def test_agrees_with_halving_when_determined(
    fx_rng: Generator, n: int, n_buttons: int
) -> None:
    for _ in range(10):
        m, presses = random_machine(fx_rng, n, n_buttons)
        reduced = reduce_to_echelon(build_joltage_matrix(m))
        if None in classify_pivots(reduced):
            continue
        assert solve_joltage_echelon(m) == sum(presses)
        assert solve_joltage(m) == sum(presses)


def test_all_rows_dropped_keeps_one_marker_per_button() -> None:
    m = Machine(1, 0, [0b0, 0b0], [0])
    original = build_joltage_matrix(m)
    reduced = reduce_to_echelon(original)
    assert reduced == []
    assert classify_pivots(reduced, m.n_buttons) == [None, None]
    assert quick_solve(original, reduced, [None, None]) == 0
    assert solve_joltage_echelon(m) == 0
    with pytest.raises(ValueError):
        classify_pivots(reduced)


def test_echelon_solver_marks_unwired_buttons_free() -> None:
    solver = EchelonJoltage()
    assert solver.solve(Machine(1, 0, [0b0, 0b0], [0])) == 0
    assert solver.pivots == [None, None]
