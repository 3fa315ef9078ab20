from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import pytest

from togglemachine.errors import UnreachableTargetError
from togglemachine.machine import Machine, mask_from_indices
from togglemachine.toggle import breadth_first_presses, min_toggle_cost

from tests.conftest import random_machine

if TYPE_CHECKING:
    from numpy.random import Generator


def test_sample_machines(sample_machines) -> None:
    assert [min_toggle_cost(m) for m in sample_machines] == [2, 3, 2]


def test_single_button_single_light() -> None:
    m = Machine(1, 0b1, [0b1], [0])
    assert min_toggle_cost(m) == 1


def test_two_lights_two_buttons() -> None:
    m = Machine(2, 0b11, [0b01, 0b10])
    assert min_toggle_cost(m) == 2


def test_all_off_target_costs_nothing() -> None:
    m = Machine(3, 0, [0b011, 0b110])
    assert min_toggle_cost(m) == 0
    assert breadth_first_presses(m) == []


def test_unreachable_target_is_fatal() -> None:
    m = Machine(2, 0b10, [0b01])
    with pytest.raises(UnreachableTargetError):
        min_toggle_cost(m)
    with pytest.raises(UnreachableTargetError):
        breadth_first_presses(m)


def test_breadth_first_plan_reaches_target(sample_machines) -> None:
    for m in sample_machines:
        plan = breadth_first_presses(m)
        assert len(plan) == min_toggle_cost(m)
        assert len(set(plan)) == len(plan)
        assert m.apply(mask_from_indices(plan)) == m.lights


@pytest.mark.parametrize(("n", "n_buttons"), [(3, 3), (4, 6), (6, 5), (5, 8)])
def test_minimum_is_exact(fx_rng: Generator, n: int, n_buttons: int) -> None:
    for _ in range(10):
        m, _ = random_machine(fx_rng, n, n_buttons)
        k = min_toggle_cost(m)
        subsets = [
            combo
            for size in range(k + 1)
            for combo in itertools.combinations(range(n_buttons), size)
            if m.apply(mask_from_indices(combo)) == m.lights
        ]
        assert min(len(c) for c in subsets) == k
        assert len(breadth_first_presses(m)) == k
