from __future__ import annotations

from math import gcd
from typing import List, Optional

from .joltage import UNREACHABLE
from .machine import Machine, bit_test

Matrix = List[List[int]]


def build_joltage_matrix(machine: Machine) -> Matrix:
    """One row per light: how often each button hits it, then its joltage."""
    matrix = [[0] * machine.n_buttons + [j] for j in machine.joltages]
    for col, button in enumerate(machine.buttons):
        for row in range(machine.n):
            if bit_test(button, row):
                matrix[row][col] += 1
    return matrix


def _row_gcd(row: List[int]) -> int:
    g = 0
    for value in row:
        g = gcd(g, value)
    return g


def reduce_to_echelon(matrix: Matrix) -> Matrix:
    """Integer-only Gauss-Jordan elimination of an augmented matrix.

    Rows are combined by cross-multiplication so no fractions appear, and
    every modified row is divided by the gcd of its entries. Pivots are made
    positive and trailing all-zero rows are dropped. The input is not
    modified.
    """
    reduced = [list(row) for row in matrix]
    if not reduced:
        return reduced
    n_rows, n_cols = len(reduced), len(reduced[0])
    n_vars = n_cols - 1

    pivot_row = 0
    for col in range(n_vars):
        if pivot_row == n_rows:
            break
        swap_row = next(
            (r for r in range(pivot_row, n_rows) if reduced[r][col] != 0),
            None,
        )
        if swap_row is None:
            continue

        reduced[pivot_row], reduced[swap_row] = (
            reduced[swap_row],
            reduced[pivot_row],
        )
        pivot = reduced[pivot_row]
        if pivot[col] < 0:
            pivot[:] = [-v for v in pivot]
        pivot_val = pivot[col]

        for r in range(n_rows):
            if r == pivot_row or reduced[r][col] == 0:
                continue
            factor = reduced[r][col]
            row = [v * pivot_val - p * factor for v, p in zip(reduced[r], pivot)]
            g = _row_gcd(row)
            if g > 1:
                row = [v // g for v in row]
            reduced[r] = row

        pivot_row += 1

    while reduced and not any(reduced[-1]):
        reduced.pop()
    return reduced


def classify_pivots(
    reduced: Matrix, n_vars: Optional[int] = None
) -> List[Optional[int]]:
    """Pivot row of each button column, or None for a free column.

    A column is a pivot column when it holds the leading coefficient of a
    row of the reduced matrix. ``n_vars`` is the number of button columns;
    it is required when every row was dropped during reduction.
    """
    if n_vars is None:
        if not reduced:
            raise ValueError("n_vars is required for an empty reduced matrix")
        n_vars = len(reduced[0]) - 1
    pivots: List[Optional[int]] = [None] * n_vars
    for r, row in enumerate(reduced):
        lead = next((c for c in range(n_vars) if row[c] != 0), None)
        if lead is not None:
            pivots[lead] = r
    return pivots


def quick_solve(
    original: Matrix, reduced: Matrix, pivots: List[Optional[int]]
) -> Optional[int]:
    """Total presses read off a reduced system, or None if not derivable.

    Without free columns each pivot row states one button's count. With free
    columns, an original row wired to every button pins the total to its
    constant; this shortcut is a heuristic that is only exact when those
    coefficients are all 1. Otherwise None signals that the system needs
    further resolution. Inconsistent or non-integral systems give
    UNREACHABLE.
    """
    if not reduced:
        # every equation reduced to 0 = 0
        return 0
    for row in reduced:
        if not any(row[:-1]) and row[-1] != 0:
            return UNREACHABLE

    if all(p is not None for p in pivots):
        presses = 0
        for col, r in enumerate(pivots):
            row = reduced[r]
            count, rest = divmod(row[-1], row[col])
            if rest or count < 0:
                return UNREACHABLE
            presses += count
        return presses

    for row in original:
        if all(row[:-1]):
            return row[-1]
    return None


def format_equations(reduced: Matrix, pivots: List[Optional[int]]) -> List[str]:
    """Render each button variable as 'x1 + 2x3 = 5' or 'x2 is free'."""
    lines = []
    for col, r in enumerate(pivots):
        if r is None:
            lines.append(f"x{col + 1} is free")
            continue
        row = reduced[r]
        parts = [f"{row[col] if row[col] != 1 else ''}x{col + 1}"]
        for j in range(col + 1, len(pivots)):
            val = row[j]
            if val == 0:
                continue
            sign = "-" if val < 0 else "+"
            coeff = abs(val)
            parts.append(f"{sign} {coeff if coeff != 1 else ''}x{j + 1}")
        lines.append(" ".join(parts) + f" = {row[-1]}")
    return lines


def solve_joltage_echelon(machine: Machine) -> Optional[int]:
    original = build_joltage_matrix(machine)
    reduced = reduce_to_echelon(original)
    pivots = classify_pivots(reduced, machine.n_buttons)
    return quick_solve(original, reduced, pivots)
