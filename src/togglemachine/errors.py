from __future__ import annotations


class ToggleMachineError(Exception):
    """Base class for solver errors."""

    pass


class MalformedMachineError(ToggleMachineError, ValueError):
    """Raised when a machine's widths or joltages are inconsistent."""

    pass


class UnreachableTargetError(ToggleMachineError):
    """Raised when no button combination produces the target light pattern."""

    pass
