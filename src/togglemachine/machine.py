from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .errors import MalformedMachineError

# Widths must fit a native word so that 2^B enumeration stays tractable.
MAX_LIGHTS = 30
MAX_BUTTONS = 30


def toggle(state: int, mask: int) -> int:
    return state ^ mask


def bit_test(mask: int, i: int) -> bool:
    return (mask >> i) & 1 == 1


def popcount(x: int) -> int:
    return bin(x).count("1")


def mask_from_indices(indices: Iterable[int]) -> int:
    mask = 0
    for i in indices:
        mask |= 1 << i
    return mask


def indices_of(mask: int, n: int) -> list[int]:
    return [i for i in range(n) if bit_test(mask, i)]


def parity_mask(vector: Sequence[int]) -> int:
    """Bit i is set when vector[i] is odd."""
    mask = 0
    for i, value in enumerate(vector):
        if value & 1:
            mask |= 1 << i
    return mask


class Machine:
    """A panel of n lights, its target pattern, button wirings and joltages.

    Light i is bit i of ``lights`` and of every button mask.
    """

    def __init__(
        self,
        n: int,
        lights: int,
        buttons: Sequence[int],
        joltages: Sequence[int] | None = None,
    ):
        self.n = int(n)
        self.lights = int(lights)
        self.buttons = tuple(int(b) for b in buttons)
        if joltages is None:
            self.joltages = (0,) * self.n
        else:
            self.joltages = tuple(int(j) for j in joltages)
        self._validate()

    def _validate(self) -> None:
        if not 1 <= self.n <= MAX_LIGHTS:
            raise MalformedMachineError(
                f"Light count must be in [1, {MAX_LIGHTS}], got {self.n}"
            )
        if not 1 <= len(self.buttons) <= MAX_BUTTONS:
            raise MalformedMachineError(
                f"Button count must be in [1, {MAX_BUTTONS}], "
                f"got {len(self.buttons)}"
            )
        full = (1 << self.n) - 1
        if self.lights < 0 or self.lights & ~full:
            raise MalformedMachineError(
                f"Light pattern {self.lights:#b} is wider than {self.n} lights"
            )
        for idx, button in enumerate(self.buttons):
            if button < 0 or button & ~full:
                raise MalformedMachineError(
                    f"Button {idx} mask {button:#b} is wider than {self.n} lights"
                )
        if len(self.joltages) != self.n:
            raise MalformedMachineError(
                f"Expected {self.n} joltages, got {len(self.joltages)}"
            )
        if any(j < 0 for j in self.joltages):
            raise MalformedMachineError(
                f"Joltages must be non-negative, got {self.joltages}"
            )

    @staticmethod
    def from_wiring(
        lit: Iterable[int],
        wiring: Iterable[Iterable[int]],
        joltages: Sequence[int],
    ) -> "Machine":
        """Build a machine from light-index lists, sized by ``joltages``."""
        buttons = [mask_from_indices(w) for w in wiring]
        return Machine(len(joltages), mask_from_indices(lit), buttons, joltages)

    @property
    def n_buttons(self) -> int:
        return len(self.buttons)

    def copy(self) -> "Machine":
        return Machine(self.n, self.lights, self.buttons, self.joltages)

    def wiring(self) -> list[list[int]]:
        return [indices_of(b, self.n) for b in self.buttons]

    def apply(self, combination: int) -> int:
        """Light state after pressing each button selected in ``combination`` once."""
        state = 0
        for j, button in enumerate(self.buttons):
            if bit_test(combination, j):
                state = toggle(state, button)
        return state

    def lights_vector(self) -> np.ndarray:
        return np.array(
            [1 if bit_test(self.lights, i) else 0 for i in range(self.n)],
            dtype=np.uint8,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Machine):
            return NotImplemented
        return (self.n, self.lights, self.buttons, self.joltages) == (
            other.n,
            other.lights,
            other.buttons,
            other.joltages,
        )

    def __hash__(self) -> int:
        return hash((self.n, self.lights, self.buttons, self.joltages))

    def __repr__(self):
        return (
            f"Machine(n={self.n}, buttons={self.n_buttons}, "
            f"on={popcount(self.lights)})"
        )

    def __str__(self) -> str:
        pattern = "".join(
            "#" if bit_test(self.lights, i) else "." for i in range(self.n)
        )
        wiring = " ".join(
            "(" + ",".join(str(i) for i in w) + ")" for w in self.wiring()
        )
        joltages = ",".join(str(j) for j in self.joltages)
        return f"[{pattern}] {wiring} {{{joltages}}}"
