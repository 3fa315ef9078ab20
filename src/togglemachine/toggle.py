from __future__ import annotations

from collections import deque

from .errors import UnreachableTargetError
from .machine import Machine, bit_test, toggle


def min_toggle_cost(machine: Machine) -> int:
    """Fewest presses that turn an all-off panel into ``machine.lights``.

    Tries every subset of buttons, so the cost is O(2^B * B); callers must
    keep B small enough to enumerate.
    """
    best = None
    for combination in range(1 << machine.n_buttons):
        state = 0
        presses = 0
        for j, button in enumerate(machine.buttons):
            if bit_test(combination, j):
                state = toggle(state, button)
                presses += 1
        if state == machine.lights and (best is None or presses < best):
            best = presses

    if best is None:
        raise UnreachableTargetError(
            f"No button combination reaches target {machine.lights:#b}"
        )
    return best


def breadth_first_presses(machine: Machine) -> list[int]:
    """Return button indices of a shortest plan, found by BFS over light states.

    Each reached state remembers the set of buttons used to get there, so a
    button is never pressed twice and press order is ignored.
    """
    if machine.lights == 0:
        return []

    visited: dict[int, frozenset[int]] = {0: frozenset()}
    queue = deque((0, j) for j in range(machine.n_buttons))

    while queue:
        current, j = queue.popleft()
        pressed = visited[current]
        new_state = toggle(current, machine.buttons[j])

        if new_state == machine.lights:
            return sorted(pressed | {j})
        if new_state in visited:
            continue

        new_pressed = pressed | {j}
        visited[new_state] = new_pressed
        for k in range(machine.n_buttons):
            if k not in new_pressed:
                queue.append((new_state, k))

    raise UnreachableTargetError(
        f"Breadth-first search exhausted without reaching {machine.lights:#b}"
    )
