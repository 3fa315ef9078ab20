from __future__ import annotations

import pytest
from numpy.random import PCG64, Generator

from togglemachine.machine import Machine
from togglemachine.parsing import parse_machines

SEED = 25

SAMPLE = """\
[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}
[...#.] (0,2,3,4) (2,3) (0,4) (0,1,2) (1,2,3,4) {7,5,12,7,2}
[.###.#] (0,1,2,3,4) (0,3,4) (0,1,2,4,5) (1,2) {10,11,11,5,10,5}
"""


@pytest.fixture()
def fx_rng() -> Generator:
    return Generator(PCG64(SEED))


@pytest.fixture()
def sample_machines() -> list[Machine]:
    return parse_machines(SAMPLE)


def random_machine(
    rng: Generator, n: int, n_buttons: int, max_presses: int = 3
) -> tuple[Machine, list[int]]:
    """Random machine whose joltages come from a known press vector.

    Every button is wired to at least one light. The light pattern is the
    parity of a random subset of buttons, so it is always reachable.
    """
    buttons = [int(rng.integers(1, 1 << n)) for _ in range(n_buttons)]
    presses = [int(rng.integers(0, max_presses + 1)) for _ in range(n_buttons)]
    joltages = [
        sum(p for p, b in zip(presses, buttons) if (b >> i) & 1) for i in range(n)
    ]
    lights = 0
    for j, b in enumerate(buttons):
        if rng.random() < 0.5:
            lights ^= b
    return Machine(n, lights, buttons, joltages), presses
