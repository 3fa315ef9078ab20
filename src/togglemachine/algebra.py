from __future__ import annotations

import itertools
from typing import List, Optional, Tuple

import numpy as np

from .machine import Machine, bit_test


def build_effect_matrix(machine: Machine) -> np.ndarray:
    """Return the L x B effect matrix of a machine.

    Column j encodes the lights wired to button j, so A @ x counts how many
    times each light is hit by the press vector x.
    """
    A = np.zeros((machine.n, machine.n_buttons), dtype=np.uint8)
    for j, button in enumerate(machine.buttons):
        for i in range(machine.n):
            if bit_test(button, i):
                A[i, j] = 1
    return A


def gf2_rref_augmented(
    A: np.ndarray, b: np.ndarray
) -> Tuple[np.ndarray, list[int]]:
    """Return RREF of [A|b] over GF(2) and the pivot column of each pivot row."""
    m, n = A.shape
    M = np.concatenate(
        [(A % 2).astype(np.uint8), (b % 2).astype(np.uint8).reshape(-1, 1)],
        axis=1,
    )

    row = 0
    pivcols: list[int] = []
    for col in range(n):
        if row == m:
            break
        candidates = np.flatnonzero(M[row:, col])
        if len(candidates) == 0:
            continue
        pivot = row + int(candidates[0])
        if pivot != row:
            M[[row, pivot]] = M[[pivot, row]]
        # Gauss-Jordan: clear the column above and below the pivot
        others = np.flatnonzero(M[:, col])
        for r in others:
            if r != row:
                M[r, :] ^= M[row, :]
        pivcols.append(col)
        row += 1
    return M, pivcols


def gf2_solve_with_nullspace(
    A: np.ndarray, b: np.ndarray
) -> Tuple[Optional[np.ndarray], List[np.ndarray]]:
    """Solve A x = b over GF(2).

    Returns:
        x0: particular solution with all free variables at 0, or None if the
            system is inconsistent
        basis: nullspace basis vectors v with A v = 0 (empty when inconsistent)
    """
    n = A.shape[1]
    R, pivcols = gf2_rref_augmented(A, b)
    R_A = R[:, :n]
    R_b = R[:, n]

    # A 0...0 | 1 row means no solution
    if np.any((R_A.sum(axis=1) == 0) & (R_b == 1)):
        return None, []

    x0 = np.zeros((n,), dtype=np.uint8)
    for ri, pc in enumerate(pivcols):
        x0[pc] = R_b[ri]

    # In RREF each pivot row only mentions its pivot and free columns, so
    # setting free column f to 1 forces pivot pc to R_A[ri, f].
    frees = [j for j in range(n) if j not in pivcols]
    basis: list[np.ndarray] = []
    for f in frees:
        v = np.zeros((n,), dtype=np.uint8)
        v[f] = 1
        for ri, pc in enumerate(pivcols):
            v[pc] = R_A[ri, f]
        basis.append(v)

    return x0, basis


def gf2_min_weight_solution(A: np.ndarray, b: np.ndarray) -> Optional[np.ndarray]:
    """Return the minimum-Hamming-weight solution to A x = b, or None."""
    x0, basis = gf2_solve_with_nullspace(A, b)
    if x0 is None:
        return None
    best = x0.copy()
    best_w = int(best.sum())
    for mask in itertools.product((0, 1), repeat=len(basis)):
        cand = x0.copy()
        for use, v in zip(mask, basis):
            if use:
                cand ^= v
        w = int(cand.sum())
        if w < best_w:
            best, best_w = cand, w
    return best
