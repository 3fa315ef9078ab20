from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from togglemachine.algebra import (
    build_effect_matrix,
    gf2_min_weight_solution,
    gf2_rref_augmented,
    gf2_solve_with_nullspace,
)
from togglemachine.machine import Machine
from togglemachine.toggle import min_toggle_cost

from tests.conftest import random_machine

if TYPE_CHECKING:
    from numpy.random import Generator


def test_effect_matrix_columns_are_buttons(sample_machines) -> None:
    A = build_effect_matrix(sample_machines[0])
    assert A.shape == (4, 6)
    np.testing.assert_array_equal(A[:, 0], [0, 0, 0, 1])
    np.testing.assert_array_equal(A[:, 4], [1, 0, 1, 0])
    np.testing.assert_array_equal(A.sum(axis=0), [1, 2, 1, 2, 2, 2])


def test_rref_pivots() -> None:
    A = np.array([[1, 1, 0], [0, 1, 1], [1, 0, 1]], dtype=np.uint8)
    b = np.array([1, 0, 1], dtype=np.uint8)
    R, pivcols = gf2_rref_augmented(A, b)
    assert pivcols == [0, 1]
    np.testing.assert_array_equal(R[2], [0, 0, 0, 0])


def test_nullspace_vectors_are_in_kernel() -> None:
    A = np.array([[1, 1, 0, 1], [0, 1, 1, 0]], dtype=np.uint8)
    b = np.array([1, 1], dtype=np.uint8)
    x0, basis = gf2_solve_with_nullspace(A, b)
    assert x0 is not None
    np.testing.assert_array_equal((A.astype(int) @ x0) % 2, b)
    assert len(basis) == 2
    for v in basis:
        np.testing.assert_array_equal((A.astype(int) @ v) % 2, [0, 0])


def test_inconsistent_system() -> None:
    m = Machine(2, 0b10, [0b01])
    assert gf2_min_weight_solution(build_effect_matrix(m), m.lights_vector()) is None


@pytest.mark.parametrize(("n", "n_buttons"), [(3, 4), (5, 5), (6, 9), (4, 10)])
def test_min_weight_matches_exhaustive(
    fx_rng: Generator, n: int, n_buttons: int
) -> None:
    for _ in range(10):
        m, _ = random_machine(fx_rng, n, n_buttons)
        A = build_effect_matrix(m)
        x = gf2_min_weight_solution(A, m.lights_vector())
        assert x is not None
        np.testing.assert_array_equal((A.astype(int) @ x) % 2, m.lights_vector())
        assert int(x.sum()) == min_toggle_cost(m)
