"""Bookkeeping of raised and pending processor exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from m68kcore.errors import InternalError, NotImplementedFeature


class ExceptionType(Enum):
    """Kind of a processor exception."""

    NONE = auto()

    # group 0
    RESET = auto()
    ADDRESS_ERROR = auto()
    BUS_ERROR = auto()

    # group 1
    TRACE = auto()
    INTERRUPT = auto()
    ILLEGAL_INSTRUCTION = auto()
    PRIVILEGE_VIOLATIONS = auto()
    LINE_1010_EMULATOR = auto()
    LINE_1111_EMULATOR = auto()

    # group 2
    TRAP = auto()
    TRAPV = auto()
    CHK_INSTRUCTION = auto()
    DIVISION_BY_ZERO = auto()


class ExceptionGroup(Enum):
    """Priority group of exceptions."""

    GROUP_0 = 0
    GROUP_1 = 1
    GROUP_2 = 2


_GROUPS: dict[ExceptionGroup, tuple[ExceptionType, ...]] = {
    ExceptionGroup.GROUP_0: (
        ExceptionType.RESET,
        ExceptionType.ADDRESS_ERROR,
        ExceptionType.BUS_ERROR,
    ),
    ExceptionGroup.GROUP_1: (
        ExceptionType.TRACE,
        ExceptionType.INTERRUPT,
        ExceptionType.ILLEGAL_INSTRUCTION,
        ExceptionType.PRIVILEGE_VIOLATIONS,
        ExceptionType.LINE_1010_EMULATOR,
        ExceptionType.LINE_1111_EMULATOR,
    ),
    ExceptionGroup.GROUP_2: (
        ExceptionType.TRAP,
        ExceptionType.TRAPV,
        ExceptionType.CHK_INSTRUCTION,
        ExceptionType.DIVISION_BY_ZERO,
    ),
}

# these carry data and must be raised through their own methods
_NEEDS_DATA = frozenset(
    {
        ExceptionType.ADDRESS_ERROR,
        ExceptionType.BUS_ERROR,
        ExceptionType.INTERRUPT,
        ExceptionType.TRAP,
    }
)


def group_exceptions(group: ExceptionGroup) -> tuple[ExceptionType, ...]:
    """Return the exceptions of ``group`` in order of priority."""
    return _GROUPS.get(group, ())


@dataclass(frozen=True)
class AddressError:
    """Details of an address or bus error.

    ``rw`` is true for a read cycle; ``in_`` is the instruction/not flag.
    """

    address: int
    func_codes: int
    rw: bool
    in_: bool


BusError = AddressError


class ExceptionManager:
    """Tracks which exceptions are raised and the data they carry."""

    def __init__(self) -> None:
        self._raised: set[ExceptionType] = set()
        self._addr_error: AddressError | None = None
        self._trap_vector = 0
        self._ipl = 0

    def is_raised(self, ex: ExceptionType | ExceptionGroup) -> bool:
        """Tell whether an exception, or any exception of a group, is raised."""
        if isinstance(ex, ExceptionGroup):
            return any(e in self._raised for e in group_exceptions(ex))
        return ex in self._raised

    def is_raised_any(self) -> bool:
        return bool(self._raised)

    def accept(self, ex: ExceptionType) -> None:
        """Clear a raised exception."""
        if ex not in self._raised:
            raise InternalError(f"{ex.name} is not raised")
        self._raised.remove(ex)

    def accept_all(self) -> None:
        self._raised.clear()

    def rise(self, ex: ExceptionType) -> None:
        """Raise an exception that carries no data."""
        if ex in _NEEDS_DATA:
            raise InternalError("Specialized rise method should be used for this exception")
        self._rise(ex)

    # group 0

    def rise_reset(self) -> None:
        self._rise(ExceptionType.RESET)

    def rise_address_error(self, error: AddressError) -> None:
        self._rise(ExceptionType.ADDRESS_ERROR)
        self._addr_error = error

    def accept_address_error(self) -> AddressError:
        self.accept(ExceptionType.ADDRESS_ERROR)
        return self._addr_error

    def rise_bus_error(self, error: BusError) -> None:
        self._rise(ExceptionType.BUS_ERROR)
        self._addr_error = error

    def accept_bus_error(self) -> BusError:
        self.accept(ExceptionType.BUS_ERROR)
        return self._addr_error

    # group 1

    def rise_trace(self) -> None:
        self._rise(ExceptionType.TRACE)

    def rise_interrupt(self, ipl: int) -> None:
        self._rise(ExceptionType.INTERRUPT)
        self._ipl = ipl

    def accept_interrupt(self) -> int:
        self.accept(ExceptionType.INTERRUPT)
        return self._ipl

    def rise_illegal_instruction(self) -> None:
        self._rise(ExceptionType.ILLEGAL_INSTRUCTION)

    def rise_privilege_violations(self) -> None:
        self._rise(ExceptionType.PRIVILEGE_VIOLATIONS)

    def rise_line_1010_emulator(self) -> None:
        self._rise(ExceptionType.LINE_1010_EMULATOR)

    def rise_line_1111_emulator(self) -> None:
        self._rise(ExceptionType.LINE_1111_EMULATOR)

    # group 2

    def rise_trap(self, vector: int) -> None:
        self._rise(ExceptionType.TRAP)
        self._trap_vector = vector

    def accept_trap(self) -> int:
        self.accept(ExceptionType.TRAP)
        return self._trap_vector

    def rise_trapv(self) -> None:
        self._rise(ExceptionType.TRAPV)

    def rise_chk_instruction(self) -> None:
        self._rise(ExceptionType.CHK_INSTRUCTION)

    def rise_division_by_zero(self) -> None:
        self._rise(ExceptionType.DIVISION_BY_ZERO)

    def _rise(self, ex: ExceptionType) -> None:
        if ex in self._raised:
            raise NotImplementedFeature("multiple exceptions of the same type are not allowed yet")
        self._raised.add(ex)