"""Checks whether an instruction may run in the current privilege mode."""

from m68kcore.instructions import InstType

_PRIVILEGED = frozenset(
    {
        InstType.MOVEtoSR,
        InstType.MOVE_USP,
        InstType.ANDItoSR,
        InstType.ORItoSR,
        InstType.EORItoSR,
        InstType.RTE,
        InstType.RESET,
        InstType.STOP,
    }
)


def is_authorized(inst: InstType, supervisor: bool) -> bool:
    """Return True if ``inst`` may run; ``supervisor`` is the S flag."""
    return supervisor or inst not in _PRIVILEGED