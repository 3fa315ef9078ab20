from __future__ import annotations

from .errors import MalformedMachineError
from .machine import Machine, mask_from_indices


def _int_list(text: str, what: str, line: str) -> list[int]:
    text = text.strip()
    if not text:
        return []
    try:
        return [int(part) for part in text.split(",")]
    except ValueError:
        raise MalformedMachineError(
            f"Bad {what} list {text!r} in line {line!r}"
        ) from None


def parse_machine(line: str) -> Machine:
    """Parse one puzzle line, e.g. ``[.##.] (3) (1,3) (2) {3,5,4}``."""
    line = line.strip()
    light_start, light_end = line.find("["), line.find("]")
    jolt_start, jolt_end = line.find("{"), line.rfind("}")
    if light_start != 0 or light_end < 0:
        raise MalformedMachineError(f"Missing light pattern in line {line!r}")
    if jolt_start < light_end or jolt_end < jolt_start:
        raise MalformedMachineError(f"Missing joltages in line {line!r}")

    pattern = line[light_start + 1 : light_end]
    lit = []
    for i, char in enumerate(pattern):
        if char == "#":
            lit.append(i)
        elif char != ".":
            raise MalformedMachineError(
                f"Unexpected character {char!r} in light pattern {pattern!r}"
            )

    buttons = []
    for part in line[light_end + 1 : jolt_start].split():
        if not (part.startswith("(") and part.endswith(")")):
            raise MalformedMachineError(
                f"Bad button wiring {part!r} in line {line!r}"
            )
        indices = _int_list(part[1:-1], "button", line)
        if any(i < 0 for i in indices):
            raise MalformedMachineError(
                f"Negative light index in button {part!r}"
            )
        buttons.append(mask_from_indices(indices))

    joltages = _int_list(line[jolt_start + 1 : jolt_end], "joltage", line)
    if len(joltages) != len(pattern):
        raise MalformedMachineError(
            f"{len(pattern)} lights but {len(joltages)} joltages in line {line!r}"
        )
    return Machine(len(pattern), mask_from_indices(lit), buttons, joltages)


def parse_machines(text: str) -> list[Machine]:
    return [parse_machine(line) for line in text.splitlines() if line.strip()]
